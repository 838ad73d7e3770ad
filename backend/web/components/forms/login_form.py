"""
Login Form Component
"""
from typing import Optional
from ..base import Component
from .auth_card import AuthCard
from .fields import TextInputField
from .submit import SubmitButton


class LoginForm(Component):
    """
    Matric number + password form posting to /login, with CSRF protection and
    an inline error line. The password is never re-rendered.
    """

    def __init__(self, csrf_token: str, error: Optional[str] = None, values: Optional[dict] = None):
        self.csrf_token = csrf_token
        self.error = error
        self.values = values or {}

    def render(self) -> str:
        matric = TextInputField("matric_number", "Matric Number", required=True).render(
            value=self.values.get("matric_number", ""),
            placeholder="Matric Number",
            autocomplete="username",
            icon="graduate",
        )
        password = TextInputField("password", "Password", required=True).render(
            input_type="password",
            placeholder="Password",
            autocomplete="current-password",
            icon="lock",
        )
        form_html = f"""
            <form method="post" action="/login" class="auth-form login-form">
              <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
              {matric}
              {password}
              <div class="form-actions">{SubmitButton("Login").render()}</div>
            </form>
        """
        return AuthCard(form_html, footer_href="/register", footer_label="Register", error=self.error).render()
