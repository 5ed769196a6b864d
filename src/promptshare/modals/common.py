"""General-purpose screens: keyboard help and yes/no confirmation."""

from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from promptshare.themes import THEME_COLORS

# ============================================================================
# Help Overlay
# ============================================================================


class HelpScreen(ModalScreen[None]):
    """Overlay listing every keyboard shortcut by area."""

    _DEFAULT_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
        (
            "Browse",
            [
                ("j / k", "Move down / up"),
                ("Enter / v", "View prompt"),
                ("m", "Load more prompts"),
                ("r", "Reload from server"),
                ("Ctrl+t", "Cycle color theme"),
            ],
        ),
        (
            "Search & Filter",
            [
                ("/", "Focus search"),
                ("x", "Clear category and tag filters"),
                ("X", "Clear search and all filters"),
                ("Esc", "Close dialog / clear search"),
            ],
        ),
        (
            "Prompts",
            [
                ("n", "New prompt"),
                ("e", "Edit prompt"),
                ("d", "Delete prompt"),
                ("u", "Undo last delete"),
                ("c", "Copy prompt content"),
                ("i", "Batch import"),
                ("t", "Manage tags and categories"),
            ],
        ),
        (
            "Dialogs",
            [
                ("Tab / Shift+Tab", "Cycle fields in the open dialog"),
                ("Ctrl+s", "Save in the editor"),
                ("?", "Help overlay"),
            ],
        ),
    ]

    BINDINGS = [
        Binding("question_mark", "close_help", "Close", show=False),
        Binding("escape", "close_help", "Close"),
        Binding("q", "close_help", "Close", show=False),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    HelpScreen .screen-dialog {
        width: 70%;
        height: 80%;
        min-width: 50;
        background: $th-panel;
        border: round $th-accent;
        padding: 1 2;
    }

    HelpScreen .dialog-heading {
        text-style: bold;
        color: $th-accent-alt;
    }

    HelpScreen .help-keys {
        padding: 0 0 1 2;
    }

    HelpScreen .dialog-hint {
        color: $th-muted;
    }
    """

    def __init__(self, sections: list[tuple[str, list[tuple[str, str]]]] | None = None) -> None:
        super().__init__()
        self._sections = sections or list(self._DEFAULT_SECTIONS)

    @staticmethod
    def _render_section_lines(entries: list[tuple[str, str]]) -> str:
        green = THEME_COLORS["green"]
        return "\n".join(f"[{green}]{key}[/]  {description}" for key, description in entries)

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="help-dialog", classes="screen-dialog"):
            yield Label("Keyboard Shortcuts", id="help-title", classes="dialog-heading")
            for section_name, entries in self._sections:
                if not entries:
                    continue
                yield Label(
                    f"[{THEME_COLORS['accent']}]{section_name}[/]",
                    classes="dialog-heading",
                )
                yield Static(self._render_section_lines(entries), classes="help-keys")
            yield Label("Close: ? / Esc / q", id="help-footer", classes="dialog-hint")

    def action_close_help(self) -> None:
        self.dismiss(None)


# ============================================================================
# Confirm Modal
# ============================================================================


class ConfirmModal(ModalScreen[bool]):
    """Yes/no confirmation shown before destructive actions."""

    BINDINGS = [
        Binding("y", "confirm", "Confirm"),
        Binding("n", "cancel", "Cancel"),
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    ConfirmModal {
        align: center middle;
    }

    ConfirmModal .screen-dialog {
        background: $th-panel;
        padding: 1 2;
        width: 56;
        height: auto;
        border: round $th-orange;
    }

    ConfirmModal #confirm-message {
        padding-bottom: 1;
    }

    ConfirmModal #confirm-buttons {
        height: auto;
        align-horizontal: right;
    }

    ConfirmModal #confirm-buttons > Button {
        margin-left: 2;
    }
    """

    def __init__(self, message: str, *, confirm_label: str = "Delete") -> None:
        super().__init__()
        self._message = message
        self._confirm_label = confirm_label

    @property
    def message(self) -> str:
        return self._message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog", classes="screen-dialog"):
            yield Static(self._message, id="confirm-message", markup=False)
            with Horizontal(id="confirm-buttons"):
                yield Button("Cancel (n)", variant="default", id="confirm-no")
                yield Button(f"{self._confirm_label} (y)", variant="error", id="confirm-yes")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#confirm-yes")
    def on_yes(self) -> None:
        self.dismiss(True)

    @on(Button.Pressed, "#confirm-no")
    def on_no(self) -> None:
        self.dismiss(False)


__all__ = [
    "ConfirmModal",
    "HelpScreen",
]
