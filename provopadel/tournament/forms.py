"""Forms for the tournament blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired
from wtforms import (
    DateField,
    FieldList,
    Form,
    FormField,
    IntegerField,
    SelectField,
    StringField,
    SubmitField,
    TextAreaField,
    TimeField,
)
from wtforms.validators import DataRequired, NumberRange, Optional

from provopadel.constants import CATEGORIES, GENDERS, PLAYOFF_STAGES, STAGE_LABELS

CATEGORY_CHOICES = [("", "Categoria")] + [(c, c) for c in CATEGORIES]
GENDER_CHOICES = [("", "Genero")] + list(GENDERS)


class TournamentForm(FlaskForm):
    """Form for creating/editing a tournament."""

    name = StringField("Nombre del torneo", validators=[DataRequired()])
    description = TextAreaField("Descripcion", validators=[Optional()])
    location = StringField("Ubicacion", validators=[Optional()])
    submit = SubmitField("Guardar")


class PairForm(FlaskForm):
    """Form for registering a pair of players."""

    p1_first_name = StringField("Nombre jugador 1", validators=[DataRequired()])
    p1_last_name = StringField("Apellido jugador 1", validators=[DataRequired()])
    p1_category = SelectField(
        "Categoria jugador 1", choices=CATEGORY_CHOICES, validators=[DataRequired()]
    )
    p2_first_name = StringField("Nombre jugador 2", validators=[DataRequired()])
    p2_last_name = StringField("Apellido jugador 2", validators=[DataRequired()])
    p2_category = SelectField(
        "Categoria jugador 2", choices=CATEGORY_CHOICES, validators=[DataRequired()]
    )
    gender = SelectField("Genero", choices=GENDER_CHOICES, validators=[DataRequired()])
    schedule_constraints = TextAreaField(
        "Restricciones horarias", validators=[Optional()]
    )
    submit = SubmitField("Guardar pareja")


class ImportPairsForm(FlaskForm):
    """Upload a CSV or Excel file of pairs."""

    file = FileField(
        "Archivo CSV o Excel",
        validators=[
            FileRequired(),
            FileAllowed(["csv", "xlsx"], "Solo archivos CSV o Excel (.xlsx)."),
        ],
    )
    submit = SubmitField("Importar")


class ScheduleWindowForm(Form):
    """One day and time range the venue is available."""

    date = DateField("Fecha", validators=[Optional()])
    start_time = TimeField("Desde", validators=[Optional()])
    end_time = TimeField("Hasta", validators=[Optional()])


class GenerateGroupsForm(FlaskForm):
    """Parameters for splitting the registered pairs into groups."""

    teams_per_group = IntegerField(
        "Equipos por zona", default=2, validators=[DataRequired(), NumberRange(min=2)]
    )
    schedule_windows = FieldList(FormField(ScheduleWindowForm), min_entries=3)
    match_duration_minutes = IntegerField(
        "Duracion del partido (min)",
        default=90,
        validators=[DataRequired(), NumberRange(min=1)],
    )
    courts_count = IntegerField(
        "Canchas", default=2, validators=[DataRequired(), NumberRange(min=1)]
    )
    submit = SubmitField("Generar zonas")


class MoveTeamForm(FlaskForm):
    """Move a team to another group."""

    target_group_id = SelectField("Zona destino", coerce=int, validators=[DataRequired()])
    submit = SubmitField("Mover")


class GeneratePlayoffsForm(FlaskForm):
    """Generate one playoff stage for a division."""

    stage = SelectField(
        "Etapa",
        choices=[(s, STAGE_LABELS[s]) for s in PLAYOFF_STAGES],
        validators=[DataRequired()],
    )
    category = SelectField("Categoria", choices=CATEGORY_CHOICES, validators=[DataRequired()])
    gender = SelectField("Genero", choices=GENDER_CHOICES, validators=[DataRequired()])
    submit = SubmitField("Generar")
