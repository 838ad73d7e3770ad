"""
Form field components for the auth forms.

Each field is a label plus an input inside an icon wrapper. Form-level errors
are shown by the card's Alert, so fields carry no error text of their own.
"""

from typing import Optional

from ..base import Component


class FormField(Component):
    """Label and input slot; optional fields get a quiet "(optional)" hint."""

    def __init__(self, field_id: str, label: str, *, required: bool = False) -> None:
        self.field_id = field_id
        self.label = label
        self.required = required

    def _label_html(self) -> str:
        marker = (
            '<span class="form-required" aria-hidden="true">*</span>'
            if self.required
            else '<span class="form-optional">(optional)</span>'
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")
        return f"<label {label_attrs}>{self.escape(self.label)}{marker}</label>"

    def render(self, input_html: str) -> str:
        return f'<div class="form-field">{self._label_html()}{input_html}</div>'


class TextInputField(FormField):
    """Single-line input (text, email, tel or password) inside a FormField.

    The `icon` class hint lets the stylesheet draw a leading glyph in the
    input, e.g. "user", "envelope", "phone", "lock", "graduate".
    """

    def render(
        self,
        *,
        value: str = "",
        input_type: str = "text",
        autocomplete: Optional[str] = None,
        placeholder: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type=input_type,
            # Never echo a password back into the page
            value=None if input_type == "password" else value,
            autocomplete=autocomplete,
            placeholder=placeholder,
            required=self.required,
            class_="form-input",
        )
        wrap_class = self.classes("form-input-wrap", **{f"form-input-wrap--{icon}": bool(icon)})
        return super().render(f'<div class="{wrap_class}"><input {input_attrs}></div>')
