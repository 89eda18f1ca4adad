from functools import wraps

from flask import current_app, g, jsonify, request

from services.session_flow import SessionFlow


def require_auth(fn):
    """Reject requests without a bearer token; the flow verifies it."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return jsonify({"error": "Missing token", "code": "UNAUTHENTICATED"}), 401
        g.token = header.split(" ", 1)[1].strip()
        return fn(*args, **kwargs)

    return wrapper


def current_flow() -> SessionFlow:
    return SessionFlow.for_session(g.db, current_app.extensions["token_service"])
