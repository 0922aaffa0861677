"""Forms for the user blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, SubmitField
from wtforms.validators import DataRequired, Length, Optional

from provopadel.constants import PLAYER_CATEGORIES


class ProfileForm(FlaskForm):
    """Club details shown on public pages."""

    club_name = StringField("Nombre del club", validators=[Optional(), Length(max=120)])
    club_location = StringField("Ubicacion", validators=[Optional(), Length(max=120)])
    submit = SubmitField("Guardar")


class PlayerForm(FlaskForm):
    """Create or edit a player."""

    first_name = StringField("Nombre", validators=[DataRequired()])
    last_name = StringField("Apellido", validators=[DataRequired()])
    category = SelectField(
        "Categoria",
        choices=[("", "Seleccionar categoria")] + [(c, c) for c in PLAYER_CATEGORIES],
        validators=[DataRequired()],
    )
    submit = SubmitField("Guardar")
