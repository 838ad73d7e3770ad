"""Placeholder views behind the navigation guard."""

from .base import Component


class PlaceholderPage(Component):
    def __init__(self, text: str) -> None:
        self.text = text

    def render(self) -> str:
        return f'<div class="placeholder-page">{self.escape(self.text)}</div>'


def dashboard_page() -> PlaceholderPage:
    return PlaceholderPage("Dashboard content...")


def vote_page() -> PlaceholderPage:
    return PlaceholderPage("Vote Page...")


def profile_page() -> PlaceholderPage:
    return PlaceholderPage("Profile Page...")
