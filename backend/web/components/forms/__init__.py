"""
Form components for the voting portal.

Provides FormField/TextInputField/SubmitButton building blocks and the two
auth forms assembled from them.
"""

from .fields import FormField, TextInputField
from .submit import SubmitButton
from .auth_card import AuthCard
from .login_form import LoginForm
from .register_form import RegisterForm

__all__ = [
    "FormField",
    "TextInputField",
    "SubmitButton",
    "AuthCard",
    "LoginForm",
    "RegisterForm",
]
