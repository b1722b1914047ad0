"""Admin routes for the application."""

from firebase_admin import firestore
from flask import current_app, jsonify, request, session

from sweepstake.competition.services import parse_deadline
from sweepstake.errors import ValidationError
from sweepstake.predictions.flow import DraftFlow
from sweepstake.predictions.storage import DeviceStorage
from sweepstake.teams.services import TeamService

from . import bp
from .decorators import admin_required
from .forms import GenerateDemoForm, ResultForm
from .services import AdminService


@bp.route("/competitions/<string:competition_id>", methods=["POST"])
@admin_required
def provision_competition(competition_id):
    """Create or extend a competition from a JSON description."""
    payload = request.get_json(silent=True) or {}
    teams = payload.get("teams") or {}
    if isinstance(teams, list):
        if not all(isinstance(team, dict) and team.get("id") for team in teams):
            raise ValidationError("Every team in the list needs an id.")
        teams = {team["id"]: team.get("name") or team["id"] for team in teams}
    if not isinstance(teams, dict):
        raise ValidationError("teams must be an object or a list.")

    db = firestore.client()
    counts = AdminService.provision_competition(
        db,
        competition_id,
        payload.get("name") or competition_id,
        parse_deadline(payload.get("deadline")),
        teams,
        payload.get("matches") or [],
    )
    return jsonify({"competition": competition_id, **counts}), 201


@bp.route("/competitions/<string:competition_id>/results", methods=["POST"])
@admin_required
def record_result(competition_id):
    """Declare the winner of a match."""
    form = ResultForm()
    if not form.validate_on_submit():
        raise ValidationError(f"Invalid result: {form.errors}")

    db = firestore.client()
    result = AdminService.record_result(
        db, competition_id, form.match_id.data, form.winner.data
    )
    return jsonify(result)


@bp.route("/competitions/<string:competition_id>/reset", methods=["POST"])
@admin_required
def reset_submissions(competition_id):
    """Re-open the competition: clear every team's flag and this device's state.

    Other devices are not told; they keep showing their locked copy until they
    clear it themselves.
    """
    db = firestore.client()
    reset_count = TeamService.reset_all(db, competition_id)
    current_app.logger.info(f"Admin reset {reset_count} teams in {competition_id}")
    DraftFlow(DeviceStorage(session), competition_id).forget()
    return jsonify(
        {
            "message": "Local data and team submissions have been reset.",
            "teamsReset": reset_count,
        }
    )


@bp.route("/competitions/<string:competition_id>/integrity", methods=["GET"])
@admin_required
def integrity(competition_id):
    """Teams whose submission record and flag disagree."""
    db = firestore.client()
    return jsonify(AdminService.find_dangling_submissions(db, competition_id))


@bp.route("/competitions/<string:competition_id>/generate", methods=["POST"])
@admin_required
def generate_demo(competition_id):
    """Seed a competition with fake teams and fixtures for testing."""
    form = GenerateDemoForm()
    if not form.validate_on_submit():
        raise ValidationError(f"Invalid request: {form.errors}")

    db = firestore.client()
    counts = AdminService.generate_demo_competition(
        db,
        competition_id,
        team_count=form.team_count.data or 8,
        days_open=form.days_open.data if form.days_open.data is not None else 7,
    )
    return jsonify({"competition": competition_id, **counts}), 201
