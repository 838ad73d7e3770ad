# Voting portal component system
# Pure Python components for escaped HTML generation

from .base import Component
from .layout import Layout
from .navigation import TopHeader
from .alert import Alert
from .forms import FormField, TextInputField, SubmitButton, AuthCard, LoginForm, RegisterForm
from .pages import PlaceholderPage, dashboard_page, vote_page, profile_page

__all__ = [
    "Component",
    "Layout",
    "TopHeader",
    "Alert",
    "FormField",
    "TextInputField",
    "SubmitButton",
    "AuthCard",
    "LoginForm",
    "RegisterForm",
    "PlaceholderPage",
    "dashboard_page",
    "vote_page",
    "profile_page",
]
