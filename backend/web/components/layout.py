"""
Page shell for the voting portal

Wraps every routed page in the document head, the top header and a centered
main column.
"""

from typing import Optional, Dict, Any, Tuple
from .base import Component
from .navigation import TopHeader


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        user: Optional[Dict[str, Any]] = None,
        current_path: str = "/",
        refresh: Optional[Tuple[int, str]] = None,
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            user: Current client's identity, or None when not signed in
            current_path: Current URL path for active link highlighting
            refresh: Optional (whole seconds, url) for a delayed navigation
        """
        self.title = title
        self.content = content
        self.user = user
        self.current_path = current_path
        self.refresh = refresh

    def render(self) -> str:
        header_html = TopHeader(self.user, self.current_path).render()
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {self._render_head()}
</head>
<body>
    <a href="#main-content" class="skip-link">Skip to main content</a>
    {header_html}
    <main id="main-content" class="main-content" role="main">
        {self.content}
    </main>
</body>
</html>"""

    def _render_head(self) -> str:
        refresh_html = ""
        if self.refresh:
            delay, url = self.refresh
            refresh_html = f'<meta http-equiv="refresh" content="{int(delay)};url={self.escape(url)}">'
        return f"""
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="description" content="Student Voting Portal">
    {refresh_html}
    <title>{self.escape(self.title)} - Student Voting Portal</title>
    <link rel="stylesheet" href="/static/css/portal.css?v=1">
    """
