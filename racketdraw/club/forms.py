"""Forms for the club blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional


class ClubForm(FlaskForm):
    """Form for creating or editing a club."""

    name = StringField("Club Name", validators=[DataRequired(), Length(min=1, max=100)])
    address = StringField("Address", validators=[Optional(), Length(max=200)])
    phone = StringField("Phone", validators=[Optional(), Length(max=30)])
