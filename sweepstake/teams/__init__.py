"""Blueprint for the team registry."""

from flask import Blueprint

bp = Blueprint(
    "teams",
    __name__,
    url_prefix="/competitions/<string:competition_id>/teams",
)

from . import routes  # noqa: E402, F401
