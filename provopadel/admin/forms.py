"""Forms for the admin blueprint."""

from flask_wtf import FlaskForm
from wtforms import (
    DateField,
    DecimalField,
    IntegerField,
    PasswordField,
    SelectField,
    StringField,
    SubmitField,
    TextAreaField,
)
from wtforms.validators import URL, DataRequired, Email, NumberRange, Optional

STATUS_OVERRIDE_CHOICES = [
    ("", "Automatico"),
    ("active", "Activo"),
    ("inactive", "Inactivo"),
]


class UserForm(FlaskForm):
    """Create an organizer account from the backoffice."""

    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
    club_name = StringField("Club", validators=[Optional()])
    club_location = StringField("Ubicacion", validators=[Optional()])
    club_logo_url = StringField("Logo (URL)", validators=[Optional(), URL()])
    submit = SubmitField("Crear usuario")


class EditUserForm(UserForm):
    """Edit an account; the password only changes when given."""

    password = PasswordField("Nueva password (opcional)", validators=[Optional()])
    status_override = SelectField("Estado", choices=STATUS_OVERRIDE_CHOICES)
    submit = SubmitField("Guardar")


class PaymentForm(FlaskForm):
    """Record or edit a subscription payment."""

    user_id = SelectField("Usuario", coerce=int, validators=[DataRequired()])
    paid_at = DateField("Fecha de pago", validators=[DataRequired()])
    plan_months = IntegerField(
        "Meses", default=1, validators=[Optional(), NumberRange(min=1)]
    )
    expires_at = DateField("Vence", validators=[Optional()])
    amount = DecimalField("Monto", places=2, validators=[Optional(), NumberRange(min=0)])
    notes = TextAreaField("Notas", validators=[Optional()])
    submit = SubmitField("Guardar pago")
