"""
Top header for the voting portal.

Shows the portal title and a greeting on every page. Authenticated clients
also get links to the protected views and to logout.
"""

from typing import Optional, Dict, Any, List, Tuple
from .base import Component

# Protected views, in header order: (href, label)
NAV_ITEMS: List[Tuple[str, str]] = [
    ("/", "Dashboard"),
    ("/vote", "Vote"),
    ("/profile", "Profile"),
]


class TopHeader(Component):
    """Header bar; `user` is None for anonymous clients."""

    def __init__(self, user: Optional[Dict[str, Any]] = None, current_path: str = "/"):
        """
        Args:
            user: {"name": ..., "matricNumber": ...} or {} for token-only sessions
            current_path: The current URL path for active link highlighting
        """
        self.user = user
        self.current_path = current_path

    def render(self) -> str:
        return f"""
    <header class="top-header" role="banner">
        <div class="top-header__inner">
            <a class="top-header__title" href="/">Student Voting Portal</a>
            {self._render_nav()}
            <div class="top-header__greeting">{self.escape(self._greeting())}</div>
        </div>
    </header>"""

    def _greeting(self) -> str:
        name = (self.user or {}).get("name") or ""
        return f"Welcome, {name}" if name else "Welcome"

    def _render_nav(self) -> str:
        if self.user is None:
            return ""
        links = [self._create_nav_link(href, label) for href, label in NAV_ITEMS]
        links.append('<a class="top-header__link top-header__logout" href="/logout">Logout</a>')
        return f'<nav class="top-header__nav" aria-label="Main navigation">{"".join(links)}</nav>'

    def _create_nav_link(self, href: str, label: str) -> str:
        active = self.current_path == href
        attrs = self.attributes(
            href=href,
            class_=self.classes("top-header__link", **{"top-header__link--active": active}),
            aria_current="page" if active else None,
        )
        return f"<a {attrs}>{self.escape(label)}</a>"
