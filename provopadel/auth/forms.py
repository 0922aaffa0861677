"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import HiddenField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, Email, EqualTo, Length


class LoginForm(FlaskForm):
    """Login form."""

    email = StringField(
        "Email",
        validators=[DataRequired(), Email()],
        render_kw={"autocomplete": "username"},
    )
    password = PasswordField(
        "Contrasena",
        validators=[DataRequired()],
        render_kw={"autocomplete": "current-password"},
    )
    next = HiddenField()
    submit = SubmitField("Ingresar")


class RegisterForm(FlaskForm):
    """Registration form."""

    email = StringField(
        "Email",
        validators=[DataRequired(), Email()],
        render_kw={"autocomplete": "email"},
    )
    password = PasswordField(
        "Contrasena",
        validators=[DataRequired(), Length(min=6)],
        render_kw={"autocomplete": "new-password"},
    )
    submit = SubmitField("Crear cuenta")


class ForgotPasswordForm(FlaskForm):
    """Form for requesting a password reset link."""

    email = StringField("Email", validators=[DataRequired(), Email()])
    submit = SubmitField("Enviar enlace")


class ResetPasswordForm(FlaskForm):
    """Form for choosing a new password from a reset link."""

    token = HiddenField(validators=[DataRequired()])
    password = PasswordField(
        "Nueva contrasena",
        validators=[
            DataRequired(),
            Length(min=6),
            EqualTo("confirm_password", message="Las contrasenas no coinciden."),
        ],
        render_kw={"autocomplete": "new-password"},
    )
    confirm_password = PasswordField(
        "Repetir contrasena",
        validators=[DataRequired()],
        render_kw={"autocomplete": "new-password"},
    )
    submit = SubmitField("Guardar")
