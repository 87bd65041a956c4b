"""Utility functions for the application."""

import smtplib

from flask import current_app, has_app_context, render_template
from flask_mail import Message

from .constants import DEFAULT_FIRESTORE_TIMEOUT
from .errors import ValidationError
from .extensions import mail


class EmailError(Exception):
    """Base class for email errors."""

    pass


def firestore_timeout():
    """Return the bounded timeout, in seconds, for Firestore reads."""
    if has_app_context():
        return current_app.config.get("FIRESTORE_TIMEOUT", DEFAULT_FIRESTORE_TIMEOUT)
    return DEFAULT_FIRESTORE_TIMEOUT


def send_email(to, subject, template, **kwargs):
    """Send an email to a recipient.

    Raises:
        EmailError: If sending the email fails.
    """
    msg = Message(
        subject,
        recipients=[to],
        html=render_template(template, **kwargs),
        sender=current_app.config["MAIL_DEFAULT_SENDER"],
    )
    try:
        mail.send(msg)
    except smtplib.SMTPAuthenticationError as e:
        raise EmailError(f"SMTP Authentication failed: {e}") from e
    except Exception as e:
        raise EmailError(f"Failed to send email: {e}") from e


def raise_form_errors(form):
    """Raise the first error of a submitted form as a ValidationError."""
    for field_name, messages in form.errors.items():
        if messages:
            raise ValidationError(str(messages[0]), field=field_name)
    raise ValidationError("Invalid form submission.")
