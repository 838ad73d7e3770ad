"""Full-width primary button that submits an auth form."""

from ..base import Component


class SubmitButton(Component):
    def __init__(self, label: str) -> None:
        self.label = label

    def render(self) -> str:
        return f'<button type="submit" class="btn btn-primary btn-block">{self.escape(self.label)}</button>'
