"""Routes for the leaderboard blueprint."""

from firebase_admin import firestore
from flask import jsonify

from . import bp
from .services import LeaderboardService


@bp.route("", methods=["GET"])
def leaderboard(competition_id):
    """Ranked scores of every submission in the competition."""
    db = firestore.client()
    rows = LeaderboardService.get_leaderboard(db, competition_id)
    return jsonify({"competition": competition_id, "teams": rows})
