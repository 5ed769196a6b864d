"""Prompt editor panel for creating and updating prompts."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Label, Select, Static, TextArea

from promptshare.modals.base import ModalPanel
from promptshare.models import DELETED_CATEGORY_LABEL, Category, Prompt, Tag
from promptshare.validation import parse_tag_names, validate_prompt_fields


class PromptEditorPanel(ModalPanel):
    """Form for a new prompt or for editing an existing one."""

    PANEL_TITLE = "New Prompt"

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
    ]

    class SaveRequested(Message):
        """Validated editor contents ready to send to the backend."""

        def __init__(self, prompt_id: str | None, data: dict[str, Any]) -> None:
            super().__init__()
            self.prompt_id = prompt_id
            self.data = data

    class ManageTaxonomyRequested(Message):
        """Open the tag/category manager above the editor."""

    DEFAULT_CSS = """
    PromptEditorPanel {
        width: 70%;
        border: tall $th-green;
    }

    PromptEditorPanel .editor-label {
        color: $th-muted;
        margin-top: 1;
    }

    PromptEditorPanel Input, PromptEditorPanel Select {
        width: 100%;
    }

    #editor-content {
        height: 10;
        background: $th-panel;
    }

    #editor-status {
        color: $th-pink;
        height: auto;
    }

    #editor-buttons {
        height: auto;
        margin-top: 1;
        align: right middle;
    }

    #editor-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, *, id: str | None = "prompt-editor") -> None:
        super().__init__(id=id)
        self._prompt: Prompt | None = None
        self._categories: list[Category] = []
        self._tags: list[Tag] = []
        self._preserved_tag_ids: list[str] = []
        # Category id of the edited prompt that no longer exists; offered as an option
        self._dangling_category: str | None = None
        self._author_default = ""

    @property
    def editing(self) -> Prompt | None:
        """The prompt being edited, or None in create mode."""
        return self._prompt

    def compose_body(self) -> ComposeResult:
        yield Label("Title", classes="editor-label")
        yield Input(placeholder="Short, descriptive title", id="editor-title")
        yield Label("Content", classes="editor-label")
        yield TextArea(id="editor-content")
        yield Label("Description", classes="editor-label")
        yield Input(placeholder="Optional summary", id="editor-description")
        yield Label("Category", classes="editor-label")
        yield Select[str]([], prompt="Uncategorized", id="editor-category")
        yield Label("Tags (comma-separated names)", classes="editor-label")
        yield Input(placeholder="e.g. writing, code-review", id="editor-tags")
        yield Static("", id="editor-status")
        with Horizontal(id="editor-buttons"):
            yield Button("Tags & Categories", variant="default", id="editor-taxonomy")
            yield Button("Cancel", variant="default", id="editor-cancel")
            yield Button("Save (Ctrl+S)", variant="primary", id="editor-save")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        prompt: Prompt | None,
        categories: Sequence[Category],
        tags: Sequence[Tag],
        *,
        author_default: str = "",
    ) -> None:
        """Fill the form for ``prompt`` (or blank for a new prompt)."""
        self._prompt = prompt
        self._author_default = author_default
        self.set_title("Edit Prompt" if prompt is not None else "New Prompt")
        category_id = prompt.category if prompt else None
        self._dangling_category = (
            category_id if category_id and all(c.id != category_id for c in categories) else None
        )
        self.refresh_taxonomy(categories, tags)
        tag_by_id = {t.id: t for t in tags}
        names = []
        self._preserved_tag_ids = []
        for tag_id in prompt.tags if prompt else ():
            tag = tag_by_id.get(tag_id)
            if tag is None:
                self._preserved_tag_ids.append(tag_id)
            else:
                names.append(tag.name)
        self.query_one("#editor-title", Input).value = prompt.title if prompt else ""
        self.query_one("#editor-content", TextArea).text = prompt.content if prompt else ""
        self.query_one("#editor-description", Input).value = prompt.description if prompt else ""
        self.query_one("#editor-tags", Input).value = ", ".join(names)
        self._set_category_value(category_id)
        self.show_status("")

    def refresh_taxonomy(self, categories: Sequence[Category], tags: Sequence[Tag]) -> None:
        """Update category options and the tag lookup, keeping the current choice."""
        select = self.query_one("#editor-category", Select)
        current = select.value
        self._categories = list(categories)
        self._tags = list(tags)
        select.set_options(self._category_options())
        if isinstance(current, str):
            self._set_category_value(current)

    def _category_options(self) -> list[tuple[str, str]]:
        options = [(c.name, c.id) for c in self._categories]
        dangling = self._dangling_category
        if dangling and all(c.id != dangling for c in self._categories):
            options.append((DELETED_CATEGORY_LABEL, dangling))
        return options

    def _set_category_value(self, category_id: str | None) -> None:
        select = self.query_one("#editor-category", Select)
        if category_id and any(value == category_id for _, value in self._category_options()):
            select.value = category_id
        else:
            select.clear()

    def show_status(self, message: str) -> None:
        self.query_one("#editor-status", Static).update(message)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def collect(self) -> dict[str, Any] | None:
        """Validate the form and return the request payload, or None on errors."""
        title = self.query_one("#editor-title", Input).value.strip()
        content = self.query_one("#editor-content", TextArea).text.strip()
        errors = validate_prompt_fields(title, content)

        tag_by_name = {t.name.casefold(): t for t in self._tags}
        tag_ids: list[str] = []
        unknown: list[str] = []
        for name in parse_tag_names(self.query_one("#editor-tags", Input).value):
            tag = tag_by_name.get(name.casefold())
            if tag is None:
                unknown.append(name)
            else:
                tag_ids.append(tag.id)
        if unknown:
            errors.append(f"Unknown tag(s): {', '.join(unknown)}. Create them first.")
        if errors:
            self.show_status("\n".join(errors))
            return None

        category = self.query_one("#editor-category", Select).value
        author = self._prompt.author if self._prompt else self._author_default
        return {
            "title": title,
            "content": content,
            "description": self.query_one("#editor-description", Input).value.strip(),
            "category": category if isinstance(category, str) else "",
            "tags": tag_ids + [t for t in self._preserved_tag_ids if t not in tag_ids],
            "author": author,
        }

    def action_save(self) -> None:
        if self.inert:
            return
        data = self.collect()
        if data is None:
            return
        self.show_status("Saving...")
        prompt_id = self._prompt.id if self._prompt else None
        self.post_message(self.SaveRequested(prompt_id, data))

    @on(Button.Pressed, "#editor-save")
    def on_save_pressed(self) -> None:
        self.action_save()

    @on(Button.Pressed, "#editor-cancel")
    def on_cancel_pressed(self) -> None:
        self.post_message(self.CloseRequested(self))

    @on(Button.Pressed, "#editor-taxonomy")
    def on_taxonomy_pressed(self) -> None:
        self.post_message(self.ManageTaxonomyRequested())


__all__ = ["PromptEditorPanel"]
