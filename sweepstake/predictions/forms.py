"""Forms for the predictions blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired


class SelectTeamForm(FlaskForm):
    """Form to pick the team this device predicts for."""

    team_id = StringField("Team")


class PickForm(FlaskForm):
    """Form to pick the winner of one match."""

    match_id = StringField("Match", validators=[DataRequired()])
    winner = StringField("Winner", validators=[DataRequired()])
