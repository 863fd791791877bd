"""Helpers shared by the form dialogs."""

from typing import Any, Optional

from textual.app import ComposeResult
from textual.screen import ModalScreen
from textual.widgets import Input, Label, Select, Static

FORM_CSS = """
.form-dialog {
    width: 72;
    height: auto;
    max-height: 90%;
    border: thick $primary;
    background: $surface;
    padding: 1 2;
}

.form-title {
    text-style: bold;
    text-align: center;
    width: 100%;
    margin-bottom: 1;
}

.field-label {
    margin-top: 1;
}

.field-error {
    color: $error;
    height: auto;
}

.field-row {
    height: auto;
}

.field-row > Vertical {
    width: 1fr;
    height: auto;
    margin-right: 1;
}

.help-text {
    color: $text-muted;
}

.form-buttons {
    height: auto;
    margin-top: 1;
    align: center middle;
}

.form-buttons Button {
    margin: 0 1;
}
"""


def field_error(name: str) -> Static:
    return Static("", id=f"{name}-error", classes="field-error")


def labelled(label: str, widget: Any, name: str) -> ComposeResult:
    """Label, input widget and error line for one form field."""
    yield Label(label, classes="field-label")
    yield widget
    yield field_error(name)


def text_or_none(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def select_int(select: Select) -> Optional[int]:
    """Selected integer id, or None when the select is blank."""
    value = select.value
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def show_errors(screen: ModalScreen, fields: list[str], errors: dict[str, str]) -> None:
    """Write the current field errors under their fields."""
    for name in fields:
        screen.query_one(f"#{name}-error", Static).update(errors.get(name, ""))


def int_or_raw(value: str) -> Any:
    """Convert digit strings to int; leave anything else for validation to reject."""
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    return value or None


def input_value(screen: ModalScreen, name: str) -> str:
    return screen.query_one(f"#{name}", Input).value
