"""Decorators for the auth blueprint."""

from functools import wraps

from flask import g, jsonify, session

from racketdraw.constants import MANAGER_ROLES, SESSION_USER_ID
from racketdraw.errors import PermissionDeniedError


def _unauthenticated():
    return (
        jsonify({"error": "unauthenticated", "message": "Please log in first."}),
        401,
    )


def login_required(f=None, roles=None):
    """Reject the request with 401 if the user is not logged in.

    When ``roles`` is given, a logged-in user without one of them gets a 403.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(roles=MANAGER_ROLES)
    def manager_view():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            if SESSION_USER_ID not in session or not g.get("user"):
                return _unauthenticated()
            if roles is not None and g.user.get("role") not in roles:
                raise PermissionDeniedError(
                    "You are not allowed to perform this action."
                )
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator


def role_required(*roles):
    """Shortcut for ``login_required(roles=...)``; defaults to coaches and admins."""
    return login_required(roles=roles or MANAGER_ROLES)
