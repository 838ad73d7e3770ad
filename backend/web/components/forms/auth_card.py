"""
Card chrome shared by the login and registration forms.
"""
from typing import Optional

from ..alert import Alert
from ..base import Component


class AuthCard(Component):
    """Centered card with logo, portal title, status lines and a footer link."""

    def __init__(
        self,
        body_html: str,
        *,
        footer_href: str,
        footer_label: str,
        error: Optional[str] = None,
        success: Optional[str] = None,
    ) -> None:
        self.body_html = body_html
        self.footer_href = footer_href
        self.footer_label = footer_label
        self.error = error
        self.success = success

    def render(self) -> str:
        footer_attrs = self.attributes(href=self.footer_href, class_="text-primary")
        return f"""
        <div class="auth-page">
          <div class="card auth-card">
            <div class="auth-card__brand">
              <img class="auth-card__logo" src="/static/img/logo.svg" alt="Student Voting Logo" width="72" height="72">
              <h2 class="auth-card__title">Student Voting Portal</h2>
            </div>
            {Alert(self.error, kind="error").render()}
            {Alert(self.success, kind="success").render()}
            {self.body_html}
            <div class="auth-card__footer">
              <a {footer_attrs}>{self.escape(self.footer_label)}</a>
            </div>
          </div>
        </div>
        """
