import hmac
from functools import wraps

from flask import current_app, jsonify, request

from sweepstake.core.constants import ADMIN_KEY_HEADER


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get("ADMIN_KEY")
        supplied = request.headers.get(ADMIN_KEY_HEADER, "")
        if not expected or not hmac.compare_digest(supplied, expected):
            current_app.logger.warning(f"Rejected admin request to {request.path}")
            return (
                jsonify(
                    {
                        "error": "forbidden",
                        "message": "You are not authorized to view this page.",
                    }
                ),
                403,
            )
        return f(*args, **kwargs)
    return decorated_function
