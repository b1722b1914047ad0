"""Routes for the predictions blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, session

from sweepstake.competition.services import CompetitionService
from sweepstake.errors import NotFoundError, ValidationError
from sweepstake.leaderboard.scoring import pick_outcomes, score

from . import bp
from .flow import DraftFlow
from .forms import PickForm, SelectTeamForm
from .storage import DeviceStorage


def _flow(competition_id):
    return DraftFlow(DeviceStorage(session), competition_id)


def _draft_payload(flow):
    return {
        "state": flow.state.value,
        "teamId": flow.team_id,
        "picks": [pick.to_dict() for pick in flow.drafts.load()],
    }


@bp.route("/teams/select", methods=["POST"])
def select_team(competition_id):
    """Choose the team this device predicts for."""
    db = firestore.client()
    form = SelectTeamForm()
    if not form.validate_on_submit():
        raise ValidationError(f"Invalid team selection: {form.errors}")

    flow = _flow(competition_id)
    team = flow.choose_team(db, form.team_id.data)
    current_app.logger.info(
        f"Device selected team {team.id} for competition {competition_id}"
    )
    return jsonify({"team": team.to_dict(), "state": flow.state.value})


@bp.route("/matches", methods=["GET"])
def matches(competition_id):
    """The match catalog merged with this device's draft."""
    db = firestore.client()
    flow = _flow(competition_id)
    return jsonify(
        {
            "matches": flow.catalog_view(db),
            "open": CompetitionService.is_open(db, competition_id),
        }
    )


@bp.route("/draft", methods=["GET"])
def view_draft(competition_id):
    """Show the in-progress picks."""
    return jsonify(_draft_payload(_flow(competition_id)))


@bp.route("/draft", methods=["POST"])
def record_pick(competition_id):
    """Pick a winner for one match."""
    db = firestore.client()
    form = PickForm()
    if not form.validate_on_submit():
        raise ValidationError(f"Invalid pick: {form.errors}")

    flow = _flow(competition_id)
    flow.record_pick(db, form.match_id.data, form.winner.data)
    return jsonify(_draft_payload(flow))


@bp.route("/submit", methods=["POST"])
def submit(competition_id):
    """Lock the draft as the team's submission."""
    db = firestore.client()
    flow = _flow(competition_id)
    submission = flow.submit(db)
    current_app.logger.info(
        f"Predictions submitted for {submission.team_id} in {competition_id}"
    )
    return (
        jsonify(
            {
                "message": "Predictions submitted successfully!",
                "submission": submission.to_dict(),
                "state": flow.state.value,
            }
        ),
        201,
    )


@bp.route("/predictions/mine", methods=["GET"])
def my_predictions(competition_id):
    """This device's locked picks against the live results."""
    db = firestore.client()
    flow = _flow(competition_id)
    submission = flow.locked_submission()
    if submission is None:
        raise NotFoundError("You have not submitted predictions yet.")

    results = CompetitionService.get_results(db, competition_id)
    return jsonify(
        {
            "teamName": submission.team_name,
            "timeSubmitted": submission.submitted_at_iso,
            "score": score(submission, results),
            "predictions": pick_outcomes(submission, results),
            "stale": flow.is_stale(db),
        }
    )


@bp.route("/device/reset", methods=["POST"])
def reset_device(competition_id):
    """Forget the chosen team, draft and locked copy on this device."""
    _flow(competition_id).forget()
    current_app.logger.info(f"Cleared device state for {competition_id}")
    return jsonify({"message": "Local data cleared."})
