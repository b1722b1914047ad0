"""Blueprint for the leaderboard."""

from flask import Blueprint

bp = Blueprint(
    "leaderboard",
    __name__,
    url_prefix="/competitions/<string:competition_id>/leaderboard",
)

from . import routes  # noqa: E402, F401
