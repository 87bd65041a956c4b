"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, current_app, g, session
from google.api_core import exceptions as google_exceptions
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import DEFAULT_FIRESTORE_TIMEOUT, SESSION_USER_ID, USERS_COLLECTION
from .extensions import csrf, mail


def _env_flag(name, default):
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def _load_credentials(app):
    """Find Firebase credentials: env JSON, then a local file, then ADC."""
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    cred_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
    )
    if os.path.exists(cred_path):
        try:
            with open(cred_path, "r") as f:
                cred_info = json.load(f)
            return credentials.Certificate(cred_path), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error loading credentials from file: {e}")

    return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        MAIL_SERVER=os.environ.get("MAIL_SERVER") or "smtp.gmail.com",
        MAIL_PORT=int(os.environ.get("MAIL_PORT") or 587),
        MAIL_USE_TLS=_env_flag("MAIL_USE_TLS", "true"),
        MAIL_USE_SSL=_env_flag("MAIL_USE_SSL", "false"),
        MAIL_USERNAME=os.environ.get("MAIL_USERNAME"),
        MAIL_PASSWORD=os.environ.get("MAIL_PASSWORD"),
        MAIL_DEFAULT_SENDER=os.environ.get("MAIL_DEFAULT_SENDER")
        or "noreply@racketdraw.app",
        FIRESTORE_TIMEOUT=float(
            os.environ.get("FIRESTORE_TIMEOUT") or DEFAULT_FIRESTORE_TIMEOUT
        ),
        RESULTS_EMAIL_ENABLED=_env_flag("RESULTS_EMAIL_ENABLED", "true"),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING") and not firebase_admin._apps:
        cred, project_id = _load_credentials(app)
        firebase_options = {"projectId": project_id} if project_id else None
        try:
            firebase_admin.initialize_app(cred, firebase_options)
        except ValueError:
            # Already initialized by another app instance in this process.
            app.logger.info("Firebase app already initialized.")

    # Initialize extensions
    mail.init_app(app)
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import player as player_bp

    app.register_blueprint(player_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import club as club_bp

    app.register_blueprint(club_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_logged_in_user():
        """If a user_id is in the session, load the user data from Firestore and store it in g."""
        user_id = session.get(SESSION_USER_ID)
        g.user = None
        if user_id is None:
            return

        from .auth.routes import user_role

        try:
            db = firestore.client()
            user_doc = (
                db.collection(USERS_COLLECTION)
                .document(user_id)
                .get(timeout=app.config["FIRESTORE_TIMEOUT"])
            )
        except google_exceptions.GoogleAPICallError as e:
            current_app.logger.error(f"Error loading user from session: {e}")
            session.clear()
            return

        if user_doc.exists:
            g.user = user_doc.to_dict() or {}
            g.user["uid"] = user_id
            g.user["role"] = user_role(g.user)
        else:
            # User ID in session but no user in DB. Clear the session.
            session.clear()
            current_app.logger.warning(
                f"User {user_id} in session but not found in Firestore."
            )

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
