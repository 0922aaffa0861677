"""Forms for the match blueprint."""

from flask_wtf import FlaskForm
from wtforms import (
    DateField,
    HiddenField,
    IntegerField,
    SelectField,
    StringField,
    SubmitField,
)
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional
from wtforms.widgets import HiddenInput

from provopadel.constants import SCHEDULE_MINUTES

HOUR_CHOICES = [("", "Hora")] + [(f"{h:02d}", f"{h:02d}") for h in range(24)]
MINUTE_CHOICES = [("", "Min")] + [(m, m) for m in SCHEDULE_MINUTES]


class ScheduleForm(FlaskForm):
    """Assign a date, a half-hour slot and a court to a match."""

    next = HiddenField()
    scheduled_date = DateField(
        "Fecha", validators=[DataRequired(message="Selecciona fecha y horario.")]
    )
    hour = SelectField(
        "Hora",
        choices=HOUR_CHOICES,
        validators=[DataRequired(message="Selecciona fecha y horario.")],
    )
    minute = SelectField(
        "Minutos",
        choices=MINUTE_CHOICES,
        validators=[DataRequired(message="Los turnos deben ser a las :00 o :30.")],
    )
    court_number = IntegerField(
        "Cancha",
        default=1,
        validators=[
            InputRequired(message="La cancha debe ser un numero valido."),
            NumberRange(min=1, message="La cancha debe ser un numero valido."),
        ],
    )
    submit = SubmitField("Programar")

    @property
    def scheduled_time(self) -> str:
        return f"{self.hour.data}:{self.minute.data}"


class SetScoresForm(FlaskForm):
    """Up to three sets of games; the rules live in validate_sets()."""

    tournament_id = IntegerField(widget=HiddenInput(), validators=[DataRequired()])
    next = HiddenField()
    set1_a = StringField("Set 1 A", validators=[Optional()])
    set1_b = StringField("Set 1 B", validators=[Optional()])
    set2_a = StringField("Set 2 A", validators=[Optional()])
    set2_b = StringField("Set 2 B", validators=[Optional()])
    set3_a = StringField("Set 3 A", validators=[Optional()])
    set3_b = StringField("Set 3 B", validators=[Optional()])
    submit = SubmitField("Guardar resultado")

    def rows(self):
        """Raw ``(a, b)`` values for each set row."""
        return [
            (getattr(self, f"set{i}_a").data, getattr(self, f"set{i}_b").data)
            for i in (1, 2, 3)
        ]

    def prefill(self, rows):
        """Load ``{a, b}`` rows into the fields."""
        for i, row in enumerate(rows[:3], start=1):
            getattr(self, f"set{i}_a").data = row["a"]
            getattr(self, f"set{i}_b").data = row["b"]
