"""Helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import g, jsonify, request

from ..core.exceptions import AuthenticationError, StoreError

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = "Could not load data right now. Please try again."


def json_error(message: str, status: int, **extra):
    payload = {"success": False, "message": message}
    payload.update(extra)
    return jsonify(payload), status


def login_required(container):
    """Resolve the current teacher into ``g.user`` before the view runs.

    No user answers 401 with a login URL that comes back to this page; a store
    failure while resolving answers 503 instead of pretending to be logged out.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.user = container.identity.me()
            except AuthenticationError:
                return json_error(
                    "Please log in to continue.",
                    401,
                    login_url=container.identity.login_with_redirect(request.full_path.rstrip("?")),
                )
            except StoreError:
                logger.exception("Could not resolve the current user")
                return json_error(STORE_UNAVAILABLE, 503)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def request_data() -> dict:
    """Form fields or a JSON body, whichever the client sent."""

    if request.is_json:
        return dict(request.get_json(silent=True) or {})
    return request.form.to_dict()
