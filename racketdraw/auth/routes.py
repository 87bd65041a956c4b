"""Routes for the auth blueprint."""

from firebase_admin import auth, firestore
from firebase_admin import exceptions as firebase_exceptions
from flask import current_app, g, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from racketdraw.constants import (
    ROLE_ADMIN,
    ROLE_PLAYER,
    ROLES,
    SESSION_ROLE,
    SESSION_USER_ID,
    USERS_COLLECTION,
)
from racketdraw.errors import NotFoundError
from racketdraw.utils import firestore_timeout, raise_form_errors

from . import bp
from .decorators import login_required, role_required
from .forms import RoleForm


def user_role(user_info):
    """Return the user's role, mapping the legacy admin flag and unknown values."""
    role = user_info.get("role")
    if role in ROLES:
        return role
    if user_info.get("isAdmin"):
        return ROLE_ADMIN
    return ROLE_PLAYER


@bp.route("/csrf", methods=["GET"])
def csrf_token():
    """Hand the client a CSRF token for its mutating requests."""
    return jsonify({"csrfToken": generate_csrf()})


@bp.route("/session_login", methods=["POST"])
def session_login():
    """Verify a Firebase ID token and open a server-side session.

    The client calls this after a successful Firebase sign-in.
    """
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"error": "unauthenticated", "message": "Missing ID token."}), 401
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        current_app.logger.warning(f"Rejected ID token: {e}")
        return (
            jsonify({"error": "unauthenticated", "message": "Invalid ID token."}),
            401,
        )

    uid = decoded_token["uid"]
    db = firestore.client()
    user_doc = (
        db.collection(USERS_COLLECTION).document(uid).get(timeout=firestore_timeout())
    )
    if not user_doc.exists:
        return (
            jsonify({"error": "not_found", "message": "User not found in Firestore."}),
            404,
        )

    user_info = user_doc.to_dict() or {}
    session.clear()
    session[SESSION_USER_ID] = uid
    session[SESSION_ROLE] = user_role(user_info)
    current_app.logger.info(f"User {uid} logged in as {session[SESSION_ROLE]}")
    return jsonify({"status": "success", "uid": uid, "role": session[SESSION_ROLE]})


@bp.route("/logout", methods=["POST"])
def logout():
    """Log the user out."""
    session.clear()
    return jsonify({"status": "success"})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    """Return the logged-in user's profile."""
    user = g.user
    return jsonify(
        {
            "uid": user["uid"],
            "role": user.get("role"),
            "name": user.get("name"),
            "email": user.get("email"),
        }
    )


@bp.route("/users", methods=["GET"])
@role_required()
def list_users():
    """List user accounts with their roles, for linking players and roles."""
    db = firestore.client()
    users = []
    for doc in db.collection(USERS_COLLECTION).stream(timeout=firestore_timeout()):
        data = doc.to_dict() or {}
        users.append(
            {
                "uid": doc.id,
                "name": data.get("name"),
                "email": data.get("email"),
                "role": user_role(data),
            }
        )
    users.sort(key=lambda u: (u["name"] or "").lower())
    return jsonify(users)


@bp.route("/users/<string:user_id>/role", methods=["PUT"])
@role_required(ROLE_ADMIN)
def set_user_role(user_id):
    """Assign a user the admin, coach or player role."""
    form = RoleForm()
    if not form.validate_on_submit():
        raise_form_errors(form)

    db = firestore.client()
    user_ref = db.collection(USERS_COLLECTION).document(user_id)
    if not user_ref.get(timeout=firestore_timeout()).exists:
        raise NotFoundError("User not found.")
    role = form.role.data
    user_ref.update({"role": role, "isAdmin": role == ROLE_ADMIN})
    current_app.logger.info(f"User {user_id} is now {role} (by {g.user['uid']})")
    return jsonify({"status": "success", "uid": user_id, "role": role})
