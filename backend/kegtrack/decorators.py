# Overview: Error-mapping decorator for API routes.

from functools import wraps
from flask import jsonify, current_app

from .services.store import NotFoundError
from .validation import ValidationError, ConflictError


def handle_errors(action: str):
    """
    Map domain exceptions raised by a route to JSON responses.

    - ValidationError -> 400 {message, errors}
    - NotFoundError   -> 404 {message}
    - ConflictError   -> 409 {message}
    - anything else   -> logged, 500 {message: "Internal server error"}

    Args:
        action: what the route does, used in the log line ("update keg status")
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                return jsonify(e.to_dict()), 400
            except NotFoundError as e:
                return jsonify({"message": e.message}), 404
            except ConflictError as e:
                return jsonify({"message": str(e)}), 409
            except Exception:
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"message": "Internal server error"}), 500

        return decorated_function
    return decorator
