"""Forms for the player blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import SelectField, StringField
from wtforms.validators import URL, DataRequired, Email, Length, Optional


class PlayerForm(FlaskForm):
    """Form for registering or editing a player."""

    firstName = StringField(
        "Given Name", validators=[DataRequired(), Length(min=1, max=50)]
    )
    lastName = StringField(
        "Family Name", validators=[DataRequired(), Length(min=1, max=50)]
    )
    email = StringField("Email", validators=[Optional(), Email()])
    phone = StringField("Phone", validators=[Optional(), Length(max=30)])
    photo = StringField("Photo URL", validators=[Optional(), URL()])
    dominantHand = SelectField(
        "Dominant Hand",
        choices=[("right", "Right"), ("left", "Left")],
        default="right",
    )
    racketBrand = StringField("Racket Brand", validators=[Optional(), Length(max=50)])
    userId = StringField("Linked User", validators=[Optional()])
