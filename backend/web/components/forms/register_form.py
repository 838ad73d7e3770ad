"""
Registration Form Component
"""
from typing import Optional
from ..base import Component
from .auth_card import AuthCard
from .fields import TextInputField
from .submit import SubmitButton


# (field id, label, input type, autocomplete, icon, required)
REGISTER_FIELDS = [
    ("surname", "Surname", "text", "family-name", "user", True),
    ("first_name", "First Name", "text", "given-name", "user", True),
    ("email", "Email", "email", "email", "envelope", True),
    ("matric_no", "Matric No", "text", "username", "graduate", True),
    ("phone", "Phone number", "tel", "tel", "phone", False),
    ("password", "Password", "password", "new-password", "lock", True),
]


class RegisterForm(Component):
    """
    Renders the registration form: surname, first name, email, matric number,
    optional phone and password, plus CSRF token and status lines.
    Entered values (except the password) are kept when the form is re-shown.
    """

    def __init__(
        self,
        csrf_token: str,
        error: Optional[str] = None,
        success: Optional[str] = None,
        values: Optional[dict] = None,
    ):
        self.csrf_token = csrf_token
        self.error = error
        self.success = success
        self.values = values or {}

    def render(self) -> str:
        rendered_fields = []
        for field_id, label, input_type, autocomplete, icon, required in REGISTER_FIELDS:
            field = TextInputField(field_id, label, required=required)
            rendered_fields.append(
                field.render(
                    value=self.values.get(field_id, ""),
                    input_type=input_type,
                    autocomplete=autocomplete,
                    placeholder=label,
                    icon=icon,
                )
            )
        all_form_fields_html = "\n".join(rendered_fields)
        form_html = f"""
            <form method="post" action="/register" class="auth-form register-form">
              <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
              {all_form_fields_html}
              <div class="form-actions">{SubmitButton("Submit").render()}</div>
            </form>
        """
        return AuthCard(
            form_html,
            footer_href="/login",
            footer_label="Back to login",
            error=self.error,
            success=self.success,
        ).render()
