"""Routes for the teams blueprint."""

from firebase_admin import firestore
from flask import jsonify

from . import bp
from .services import TeamService


@bp.route("", methods=["GET"])
def list_teams(competition_id):
    """List registered teams; already-entered teams are flagged, not hidden."""
    db = firestore.client()
    teams = TeamService.list_teams(db, competition_id)
    return jsonify({"teams": [team.to_dict() for team in teams]})
