"""Routes for the competition blueprint."""

from firebase_admin import firestore
from flask import jsonify

from . import bp
from .services import CompetitionService, utcnow


@bp.route("/<string:competition_id>", methods=["GET"])
def view_competition(competition_id):
    """Name, deadline and whether submissions are still accepted."""
    db = firestore.client()
    competition = CompetitionService.get_competition(db, competition_id)
    return jsonify(competition.to_dict(utcnow()))


@bp.route("/<string:competition_id>/results", methods=["GET"])
def view_results(competition_id):
    """Declared winners so far, keyed by match id."""
    db = firestore.client()
    return jsonify({"results": CompetitionService.get_results(db, competition_id)})
