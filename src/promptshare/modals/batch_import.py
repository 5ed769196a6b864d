"""Batch import panel: paste or load JSON, validate, then import."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Label, Static, TextArea

from promptshare.modals.base import ModalPanel
from promptshare.query import escape_rich_text
from promptshare.themes import THEME_COLORS
from promptshare.validation import (
    ImportParseError,
    ImportValidation,
    parse_import_text,
    prompt_from_text_file,
    validate_import_batch,
)

# Errors listed under the summary line; the rest are counted only
MAX_LISTED_ERRORS = 8


def load_import_file(path: Path) -> str:
    """Read ``path`` as import text.

    ``.txt`` files become a single prompt (first line title, rest content);
    anything else is returned verbatim for JSON parsing.

    Raises:
        OSError: If the file cannot be read.
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".txt":
        return json.dumps([prompt_from_text_file(text)], indent=2, ensure_ascii=False)
    return text


class BatchImportPanel(ModalPanel):
    """Validates and submits a batch of prompts."""

    PANEL_TITLE = "Batch Import"

    class ImportRequested(Message):
        """Validated prompt objects to send to the import endpoint."""

        def __init__(self, prompts: list[dict[str, Any]]) -> None:
            super().__init__()
            self.prompts = prompts

    DEFAULT_CSS = """
    BatchImportPanel {
        width: 75%;
        border: tall $th-orange;
    }

    #import-text {
        height: 12;
        background: $th-panel;
    }

    BatchImportPanel .import-row {
        height: auto;
    }

    #import-path {
        width: 1fr;
    }

    #import-status {
        height: auto;
        max-height: 10;
        margin-top: 1;
    }

    #import-buttons {
        height: auto;
        align: right middle;
    }

    #import-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, *, id: str | None = "batch-import") -> None:
        super().__init__(id=id)
        self._validation: ImportValidation | None = None

    @property
    def validation(self) -> ImportValidation | None:
        """Result of the last validation, reset whenever the text changes."""
        return self._validation

    def compose_body(self) -> ComposeResult:
        yield Label("Load from file (.json or .txt)")
        with Horizontal(classes="import-row"):
            yield Input(placeholder="/path/to/prompts.json", id="import-path")
            yield Button("Load", id="import-load")
        yield Label("Or paste a JSON array of prompts")
        yield TextArea(id="import-text")
        yield Static("", id="import-status")
        with Horizontal(id="import-buttons"):
            yield Button("Cancel", id="import-cancel")
            yield Button("Validate", variant="default", id="import-validate")
            yield Button("Import", variant="primary", id="import-submit", disabled=True)

    def reset(self) -> None:
        self.query_one("#import-path", Input).value = ""
        self.query_one("#import-text", TextArea).text = ""
        self._set_status("")
        self._set_validation(None)

    def _set_status(self, markup: str) -> None:
        self.query_one("#import-status", Static).update(markup)

    def _set_validation(self, validation: ImportValidation | None) -> None:
        self._validation = validation
        self.query_one("#import-submit", Button).disabled = not (
            validation is not None and validation.valid
        )

    def load_path(self, raw_path: str) -> bool:
        """Load a file into the text area; reports problems in the status line."""
        raw_path = raw_path.strip()
        if not raw_path:
            self._set_status(f"[{THEME_COLORS['pink']}]Enter a file path first.[/]")
            return False
        path = Path(raw_path).expanduser()
        try:
            text = load_import_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            self._set_status(
                f"[{THEME_COLORS['pink']}]Could not read {escape_rich_text(str(path))}: "
                f"{escape_rich_text(str(exc))}[/]"
            )
            return False
        self.query_one("#import-text", TextArea).text = text
        self._set_status(f"Loaded {escape_rich_text(path.name)}. Press Validate.")
        return True

    def validate_text(self) -> ImportValidation | None:
        """Parse and validate the current text; None when it is not JSON prompt data."""
        text = self.query_one("#import-text", TextArea).text
        pink = THEME_COLORS["pink"]
        try:
            items = parse_import_text(text)
        except ImportParseError as exc:
            self._set_validation(None)
            self._set_status(f"[{pink}]{escape_rich_text(str(exc))}[/]")
            return None
        validation = validate_import_batch(items)
        self._set_validation(validation)
        lines = [f"[bold]{validation.summary}[/]"]
        for error in validation.errors[:MAX_LISTED_ERRORS]:
            lines.append(f"[{pink}]{escape_rich_text(error)}[/]")
        hidden = len(validation.errors) - MAX_LISTED_ERRORS
        if hidden > 0:
            lines.append(f"[{THEME_COLORS['muted']}]... and {hidden} more[/]")
        self._set_status("\n".join(lines))
        return validation

    def submit(self) -> bool:
        """Post the valid prompts from the last validation."""
        if self.inert or self._validation is None or not self._validation.valid:
            return False
        self.post_message(self.ImportRequested(list(self._validation.valid)))
        return True

    @on(TextArea.Changed, "#import-text")
    def on_text_changed(self) -> None:
        self._set_validation(None)

    @on(Button.Pressed, "#import-load")
    @on(Input.Submitted, "#import-path")
    def on_load(self) -> None:
        self.load_path(self.query_one("#import-path", Input).value)

    @on(Button.Pressed, "#import-validate")
    def on_validate(self) -> None:
        self.validate_text()

    @on(Button.Pressed, "#import-submit")
    def on_submit(self) -> None:
        self.submit()

    @on(Button.Pressed, "#import-cancel")
    def on_cancel(self) -> None:
        self.post_message(self.CloseRequested(self))


__all__ = ["MAX_LISTED_ERRORS", "BatchImportPanel", "load_import_file"]
