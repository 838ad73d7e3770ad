"""Inline status message shown above the auth forms."""

from typing import Optional

from .base import Component


class Alert(Component):
    """Error or success line; renders nothing without a message."""

    def __init__(self, message: Optional[str], *, kind: str = "error") -> None:
        self.message = message
        self.kind = kind

    def render(self) -> str:
        if not self.message:
            return ""
        role = "alert" if self.kind == "error" else "status"
        return f'<div class="alert alert--{self.escape(self.kind)}" role="{role}">{self.escape(self.message)}</div>'
