"""Forms for the admin blueprint."""

from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField
from wtforms.validators import DataRequired, NumberRange, Optional


class ResultForm(FlaskForm):
    """Form to declare the winner of a match."""

    match_id = StringField("Match", validators=[DataRequired()])
    winner = StringField("Winner", validators=[DataRequired()])


class GenerateDemoForm(FlaskForm):
    """Form to seed a demo competition."""

    team_count = IntegerField(
        "Teams", validators=[Optional(), NumberRange(min=2, max=64)], default=8
    )
    days_open = IntegerField(
        "Days open", validators=[Optional(), NumberRange(min=0)], default=7
    )
