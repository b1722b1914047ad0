"""Blueprint for competitions, their match catalog and results."""

from flask import Blueprint

bp = Blueprint("competition", __name__, url_prefix="/competitions")

from . import routes  # noqa: E402, F401
