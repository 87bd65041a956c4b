"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import SelectField
from wtforms.validators import DataRequired

from racketdraw.constants import ROLES


class RoleForm(FlaskForm):
    """Form for assigning a role to a user."""

    role = SelectField(
        "Role", choices=[(r, r.capitalize()) for r in ROLES], validators=[DataRequired()]
    )
