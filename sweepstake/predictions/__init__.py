"""Blueprint for drafting and locking predictions."""

from flask import Blueprint

bp = Blueprint(
    "predictions",
    __name__,
    url_prefix="/competitions/<string:competition_id>",
)

from . import routes  # noqa: E402, F401
