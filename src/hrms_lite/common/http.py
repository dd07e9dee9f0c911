from __future__ import annotations

from functools import wraps
from typing import Any, Optional, Sequence

from flask import current_app, jsonify, request

from ..core.exceptions import ConflictError, FieldError, NotFoundError, ValidationError
from .logger import get_logger
from .pagination import Pagination

log = get_logger("http")


def success(
    data: Any = None,
    *,
    message: Optional[str] = None,
    pagination: Optional[Pagination] = None,
    status: int = 200,
):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination.to_dict()
    return jsonify(body), status


def failure(message: str, status: int, errors: Optional[Sequence[FieldError]] = None):
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = [e.to_dict() for e in errors]
    return jsonify(body), status


def json_body() -> dict:
    """Request JSON object, or an empty dict for a missing/invalid body."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def api_endpoint(view):
    """Turn domain exceptions raised by a view into the JSON error envelope."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return failure(str(e), 400, e.errors)
        except ConflictError as e:
            return failure(str(e), 400)
        except NotFoundError as e:
            return failure(str(e), 404)
        except Exception as e:
            log.exception("Unhandled error on %s %s", request.method, request.path)
            if bool(current_app.config.get("DEBUG", False)):
                return failure(f"Internal server error: {e}", 500)
            return failure("Internal server error", 500)

    return wrapper
