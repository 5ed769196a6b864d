"""Read-only prompt panel with comments and results."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Input, Label, ListItem, ListView, Markdown, Static, TextArea

from promptshare.modals.base import ModalPanel
from promptshare.models import Category, Comment, Prompt, Result, Tag
from promptshare.themes import THEME_COLORS
from promptshare.widgets.details import (
    build_prompt_markdown,
    render_comment,
    render_prompt_details,
    render_result,
)


class FeedbackItem(ListItem):
    """List entry for one comment or result."""

    def __init__(self, record: Comment | Result, markup: str) -> None:
        super().__init__()
        self.record = record
        self._markup = markup

    def compose(self) -> ComposeResult:
        yield Static(self._markup)


class PromptViewPanel(ModalPanel):
    """Shows one prompt and lets the user act on it."""

    PANEL_TITLE = "Prompt"

    BINDINGS = [
        Binding("e", "request('edit')", "Edit", show=False),
        Binding("d", "request('delete')", "Delete", show=False),
        Binding("c", "request('copy')", "Copy", show=False),
    ]

    class ActionRequested(Message):
        """User picked edit/delete/copy for the shown prompt."""

        def __init__(self, action: str, prompt: Prompt) -> None:
            super().__init__()
            self.action = action
            self.prompt = prompt

    class FeedbackAddRequested(Message):
        """Add a comment or result to the shown prompt."""

        def __init__(self, kind: str, prompt_id: str, content: str) -> None:
            super().__init__()
            self.kind = kind
            self.prompt_id = prompt_id
            self.content = content

    class FeedbackDeleteRequested(Message):
        """Delete a comment or result."""

        def __init__(self, record: Comment | Result) -> None:
            super().__init__()
            self.record = record

    DEFAULT_CSS = """
    PromptViewPanel {
        width: 85%;
        height: 90%;
    }

    PromptViewPanel .panel-body {
        height: 1fr;
    }

    #view-scroll {
        height: 1fr;
    }

    #view-details {
        padding: 0 1;
        margin-bottom: 1;
    }

    #view-content {
        height: auto;
        margin: 0 1 1 1;
        padding: 0 1;
        background: $th-panel;
    }

    PromptViewPanel .view-heading {
        text-style: bold;
        color: $th-accent;
        margin-top: 1;
    }

    PromptViewPanel ListView {
        height: auto;
        max-height: 10;
        background: $th-panel;
    }

    #view-result-input {
        height: 5;
    }

    PromptViewPanel .view-row {
        height: auto;
    }

    PromptViewPanel .view-row Input {
        width: 1fr;
    }

    #view-actions {
        height: auto;
        align: right middle;
    }

    #view-actions Button {
        margin-left: 1;
    }
    """

    def __init__(self, *, id: str | None = "prompt-view") -> None:
        super().__init__(id=id)
        self._prompt: Prompt | None = None

    @property
    def prompt(self) -> Prompt | None:
        return self._prompt

    def compose_body(self) -> ComposeResult:
        with VerticalScroll(id="view-scroll"):
            yield Static("", id="view-details")
            yield Markdown("", id="view-content")
            yield Label("Comments", classes="view-heading")
            yield ListView(id="view-comments")
            with Horizontal(classes="view-row"):
                yield Input(placeholder="Add a comment...", id="view-comment-input")
                yield Button("Add", id="view-comment-add")
                yield Button("Delete selected", variant="error", id="view-comment-delete")
            yield Label("Results", classes="view-heading")
            yield ListView(id="view-results")
            yield TextArea(id="view-result-input")
            with Horizontal(classes="view-row"):
                yield Button("Add result", id="view-result-add")
                yield Button("Delete selected", variant="error", id="view-result-delete")
        with Horizontal(id="view-actions"):
            yield Button("Copy (c)", id="view-copy")
            yield Button("Edit (e)", variant="primary", id="view-edit")
            yield Button("Delete (d)", variant="error", id="view-delete")

    def show_prompt(
        self, prompt: Prompt, categories: Sequence[Category], tags: Sequence[Tag]
    ) -> None:
        """Render ``prompt``; clears feedback lists until they are loaded."""
        changed = self._prompt is None or self._prompt.id != prompt.id
        self._prompt = prompt
        self.set_title(f"Prompt {prompt.id}" if prompt.id else "Prompt")
        self.query_one("#view-details", Static).update(
            render_prompt_details(prompt, categories, tags)
        )
        self.query_one("#view-content", Markdown).update(build_prompt_markdown(prompt))
        if changed:
            self.show_feedback(None, None)

    def show_feedback(
        self, comments: Sequence[Comment] | None, results: Sequence[Result] | None
    ) -> None:
        """Replace both feedback lists; None renders a loading placeholder."""
        self._fill(self.query_one("#view-comments", ListView), comments, render_comment)
        self._fill(self.query_one("#view-results", ListView), results, render_result)

    @staticmethod
    def _fill(
        list_view: ListView,
        records: Sequence[Comment] | Sequence[Result] | None,
        render: Callable[..., str],
    ) -> None:
        list_view.clear()
        muted = THEME_COLORS["muted"]
        if records is None:
            list_view.append(ListItem(Static(f"[{muted}]Loading...[/]"), disabled=True))
            return
        if not records:
            list_view.append(ListItem(Static(f"[{muted}]Nothing yet[/]"), disabled=True))
            return
        for record in records:
            list_view.append(FeedbackItem(record, render(record)))

    def _selected_record(self, list_id: str) -> Comment | Result | None:
        item = self.query_one(list_id, ListView).highlighted_child
        return item.record if isinstance(item, FeedbackItem) else None

    def action_request(self, action: str) -> None:
        """Post ``action`` (edit, delete or copy) for the shown prompt."""
        if self.inert or self._prompt is None:
            return
        self.post_message(self.ActionRequested(action, self._prompt))

    @on(Button.Pressed, "#view-edit")
    def on_edit_pressed(self) -> None:
        self.action_request("edit")

    @on(Button.Pressed, "#view-delete")
    def on_delete_pressed(self) -> None:
        self.action_request("delete")

    @on(Button.Pressed, "#view-copy")
    def on_copy_pressed(self) -> None:
        self.action_request("copy")

    @on(Button.Pressed, "#view-comment-add")
    @on(Input.Submitted, "#view-comment-input")
    def on_add_comment(self) -> None:
        field = self.query_one("#view-comment-input", Input)
        content = field.value.strip()
        if not content or self._prompt is None:
            return
        field.value = ""
        self.post_message(self.FeedbackAddRequested("comment", self._prompt.id, content))

    @on(Button.Pressed, "#view-result-add")
    def on_add_result(self) -> None:
        area = self.query_one("#view-result-input", TextArea)
        content = area.text.strip()
        if not content or self._prompt is None:
            return
        area.text = ""
        self.post_message(self.FeedbackAddRequested("result", self._prompt.id, content))

    @on(Button.Pressed, "#view-comment-delete")
    def on_delete_comment(self) -> None:
        record = self._selected_record("#view-comments")
        if record is not None:
            self.post_message(self.FeedbackDeleteRequested(record))

    @on(Button.Pressed, "#view-result-delete")
    def on_delete_result(self) -> None:
        record = self._selected_record("#view-results")
        if record is not None:
            self.post_message(self.FeedbackDeleteRequested(record))


__all__ = ["FeedbackItem", "PromptViewPanel"]
