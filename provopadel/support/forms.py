"""Forms for the support blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from provopadel.constants import TICKET_STATUSES

from .services import STATUS_LABELS


class TicketForm(FlaskForm):
    """Open a new ticket."""

    subject = StringField("Asunto", validators=[DataRequired(), Length(max=200)])
    message = TextAreaField("Mensaje", validators=[DataRequired()])
    submit = SubmitField("Enviar")


class ReplyForm(FlaskForm):
    """Add a message to a ticket."""

    body = TextAreaField("Respuesta", validators=[DataRequired()])
    submit = SubmitField("Responder")


class TicketUpdateForm(FlaskForm):
    """Admin-side status and tags."""

    status = SelectField(
        "Estado",
        choices=[(s, STATUS_LABELS[s]) for s in TICKET_STATUSES],
        validators=[DataRequired()],
    )
    tags = StringField("Etiquetas", validators=[Optional()])
    submit = SubmitField("Guardar")
