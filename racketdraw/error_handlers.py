"""JSON error handlers registered for the whole application."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core import exceptions as google_exceptions

from .errors import AppError, PhaseError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Report user-correctable input errors with the offending field."""
    current_app.logger.warning(f"Validation Error: {error.message} ({error.field})")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(PhaseError)
def handle_phase_error(error):
    """Report unmet preconditions for a tournament phase transition."""
    current_app.logger.warning(f"Phase Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(google_exceptions.DeadlineExceeded)
def handle_storage_timeout(e):
    """Report a storage timeout; the whole operation may be retried."""
    current_app.logger.error(f"Storage Timeout: {e}")
    return (
        jsonify(
            {
                "error": "storage_timeout",
                "message": "The database did not answer in time. Please try again.",
            }
        ),
        504,
    )


@error_handlers_bp.app_errorhandler(google_exceptions.GoogleAPICallError)
def handle_db_error(e):
    """Handles database errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the user
    return (
        jsonify(
            {
                "error": "storage_error",
                "message": "A database error occurred. Please try again later.",
            }
        ),
        503,
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, which usually indicate an expired session."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return jsonify({"error": "csrf", "message": e.description}), 400


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "not_found", "message": "Not found."}), 404


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "internal", "message": "Internal server error."}), 500
