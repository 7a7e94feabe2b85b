from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, jsonify, request, session

from ..users.service import Session

SESSION_KEY = "session_handle"


def request_data() -> dict:
    """Form fields or JSON body, whichever the client sent."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def make_guards(container):
    """Build the login/view decorators bound to a container.

    The authenticated Session is exposed to the view as ``g.auth``.
    """

    def _load() -> Optional[Session]:
        return container.auth_service.get_session(session.get(SESSION_KEY))

    def login_required(view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            auth = _load()
            if auth is None:
                session.pop(SESSION_KEY, None)
                return error("Please sign in to continue", 401)
            g.auth = auth
            return view(*args, **kwargs)

        return wrapper

    def view_required(view_id: str):
        def decorator(view: Callable):
            @wraps(view)
            def wrapper(*args, **kwargs):
                auth = _load()
                if auth is None:
                    session.pop(SESSION_KEY, None)
                    return error("Please sign in to continue", 401)
                if not container.access_policy.is_view_allowed(auth.role, view_id):
                    return error("You do not have access to this page", 403)
                g.auth = auth
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return login_required, view_required
