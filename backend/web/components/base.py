"""
Base Component Class for the portal's UI components

Pages are assembled from small Python objects that render HTML strings.
Everything user-supplied goes through `escape`; attribute values through
`attributes`, which escapes as well.
"""

from typing import Optional, Any
import html


class Component:
    """Base class for all UI components of the portal."""

    def render(self) -> str:
        """Render the component as an HTML string"""
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[str]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Join CSS classes, adding each keyword class whose value is True.

        Example:
            >>> Component.classes("alert", alert_error=True, hidden=False)
            "alert alert_error"
        """
        names = [a for a in args if a]
        names.extend(key for key, value in conditionals.items() if value)
        return " ".join(names)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build an HTML attribute string from keyword arguments.

        Trailing underscores map reserved names (class_ -> class, for_ -> for);
        inner underscores become hyphens (aria_invalid -> aria-invalid). True
        renders a bare boolean attribute; False and None are dropped.

        Example:
            >>> Component.attributes(id="matric_no", aria_invalid="false", required=True)
            'id="matric_no" aria-invalid="false" required'
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")

            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')

        return " ".join(result)
