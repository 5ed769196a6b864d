"""Tag and category manager panel."""

from __future__ import annotations

from collections.abc import Sequence

from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from promptshare.modals.base import ModalPanel
from promptshare.models import TAXONOMY_KINDS, Category, Tag
from promptshare.query import escape_rich_text
from promptshare.themes import THEME_COLORS, get_tag_color
from promptshare.validation import (
    find_duplicate_name,
    suggest_similar_names,
    validate_taxonomy_name,
)

# kind -> (record list, name input, id prefix for the row buttons)
_KIND_WIDGETS = {
    "Category": ("#taxonomy-categories", "#taxonomy-category-input", "taxonomy-category"),
    "Tag": ("#taxonomy-tags", "#taxonomy-tag-input", "taxonomy-tag"),
}


def _check_kind(kind: str) -> None:
    if kind not in TAXONOMY_KINDS:
        raise ValueError(f"Unknown taxonomy kind: {kind!r}")


class TaxonomyPanel(ModalPanel):
    """Lists categories and tags; adds, renames and deletes them.

    Rename and delete act on the highlighted entry of the kind's list. The
    name input doubles as the new name for both add and rename.
    """

    PANEL_TITLE = "Tags & Categories"

    class AddRequested(Message):
        """A validated new tag or category name."""

        def __init__(self, kind: str, name: str) -> None:
            super().__init__()
            self.kind = kind
            self.name = name

    class RenameRequested(Message):
        def __init__(self, kind: str, record: Category | Tag, name: str) -> None:
            super().__init__()
            self.kind = kind
            self.record = record
            self.name = name

    class DeleteRequested(Message):
        def __init__(self, kind: str, record: Category | Tag) -> None:
            super().__init__()
            self.kind = kind
            self.record = record

    class UndoRequested(Message):
        """Restore the most recently deleted tag or category."""

    DEFAULT_CSS = """
    TaxonomyPanel {
        width: 60%;
        min-width: 52;
        border: tall $th-purple;
    }

    TaxonomyPanel .taxonomy-heading {
        text-style: bold;
        color: $th-accent;
        margin-top: 1;
    }

    TaxonomyPanel .taxonomy-list {
        height: auto;
        max-height: 6;
        background: $th-panel;
    }

    TaxonomyPanel .taxonomy-row {
        height: auto;
    }

    TaxonomyPanel .taxonomy-row Input {
        width: 1fr;
    }

    TaxonomyPanel #taxonomy-footer {
        height: auto;
        margin-top: 1;
    }

    TaxonomyPanel #taxonomy-status {
        width: 1fr;
        height: auto;
    }
    """

    def __init__(self, *, id: str | None = "taxonomy-manager") -> None:
        super().__init__(id=id)
        self._categories: list[Category] = []
        self._tags: list[Tag] = []

    def compose_body(self) -> ComposeResult:
        for kind, heading, placeholder in (
            ("Category", "Categories", "Category name"),
            ("Tag", "Tags", "Tag name"),
        ):
            list_id, input_id, prefix = _KIND_WIDGETS[kind]
            yield Label(heading, classes="taxonomy-heading")
            yield OptionList(id=list_id[1:], classes="taxonomy-list")
            with Horizontal(classes="taxonomy-row"):
                yield Input(placeholder=placeholder, id=input_id[1:])
                yield Button("Add", variant="primary", id=f"{prefix}-add")
                yield Button("Rename", id=f"{prefix}-rename")
                yield Button("Delete", variant="error", id=f"{prefix}-delete")
        with Horizontal(id="taxonomy-footer"):
            yield Static("", id="taxonomy-status")
            yield Button("Undo delete", id="taxonomy-undo", disabled=True)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def load(self, categories: Sequence[Category], tags: Sequence[Tag]) -> None:
        """Replace both lists, keeping each highlight position where possible."""
        self._categories = list(categories)
        self._tags = list(tags)
        self._fill("Category", [escape_rich_text(c.name) for c in self._categories])
        self._fill(
            "Tag",
            [f"[{get_tag_color(t.name)}]#{escape_rich_text(t.name)}[/]" for t in self._tags],
        )

    def _fill(self, kind: str, labels: list[str]) -> None:
        option_list = self.query_one(_KIND_WIDGETS[kind][0], OptionList)
        previous = option_list.highlighted
        option_list.clear_options()
        if not labels:
            muted = THEME_COLORS["muted"]
            empty = "No categories yet" if kind == "Category" else "No tags yet"
            option_list.add_option(Option(f"[{muted}]{empty}[/]", disabled=True))
            return
        option_list.add_options(labels)
        option_list.highlighted = min(previous or 0, len(labels) - 1)

    def _records(self, kind: str) -> Sequence[Category | Tag]:
        return self._categories if kind == "Category" else self._tags

    def selected(self, kind: str) -> Category | Tag | None:
        """The highlighted record of ``kind``, if any."""
        _check_kind(kind)
        records = self._records(kind)
        index = self.query_one(_KIND_WIDGETS[kind][0], OptionList).highlighted
        if index is None or not 0 <= index < len(records):
            return None
        return records[index]

    def set_undo_available(self, available: bool) -> None:
        self.query_one("#taxonomy-undo", Button).disabled = not available

    def show_status(self, message: str, *, error: bool = False) -> None:
        color = THEME_COLORS["pink"] if error else THEME_COLORS["green"]
        text = f"[{color}]{escape_rich_text(message)}[/]" if message else ""
        self.query_one("#taxonomy-status", Static).update(text)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _name_input(self, kind: str) -> Input:
        return self.query_one(_KIND_WIDGETS[kind][1], Input)

    def _name_error(
        self, kind: str, name: str, *, renaming: Category | Tag | None = None
    ) -> str | None:
        error = validate_taxonomy_name(name, kind)
        if error is not None:
            return error
        others = [r.name for r in self._records(kind) if r is not renaming]
        duplicate = find_duplicate_name(name, others)
        if duplicate is not None:
            return f'{kind} "{duplicate}" already exists'
        return None

    def submit(self, kind: str) -> bool:
        """Validate the input for ``kind`` and post an AddRequested message."""
        _check_kind(kind)
        field = self._name_input(kind)
        name = field.value.strip()
        error = self._name_error(kind, name)
        if error is not None:
            self.show_status(error, error=True)
            return False
        similar = suggest_similar_names(name, [r.name for r in self._records(kind)])
        if similar:
            self.show_status(f"Adding {kind.lower()}; similar: {', '.join(similar)}")
        else:
            self.show_status(f"Adding {kind.lower()}...")
        field.value = ""
        self.post_message(self.AddRequested(kind, name))
        return True

    def submit_rename(self, kind: str) -> bool:
        """Rename the highlighted record of ``kind`` to the input's name."""
        record = self.selected(kind)
        if record is None:
            self.show_status(f"Select a {kind.lower()} to rename", error=True)
            return False
        field = self._name_input(kind)
        name = field.value.strip()
        if name == record.name:
            self.show_status(f"{kind} name is unchanged", error=True)
            return False
        error = self._name_error(kind, name, renaming=record)
        if error is not None:
            self.show_status(error, error=True)
            return False
        self.show_status(f"Renaming {kind.lower()}...")
        field.value = ""
        self.post_message(self.RenameRequested(kind, record, name))
        return True

    def request_delete(self, kind: str) -> bool:
        record = self.selected(kind)
        if record is None:
            self.show_status(f"Select a {kind.lower()} to delete", error=True)
            return False
        self.post_message(self.DeleteRequested(kind, record))
        return True

    @on(OptionList.OptionSelected, ".taxonomy-list")
    def on_record_selected(self, event: OptionList.OptionSelected) -> None:
        """Enter on a record copies its name into the input for renaming."""
        kind = "Category" if event.option_list.id == "taxonomy-categories" else "Tag"
        record = self.selected(kind)
        if record is not None:
            field = self._name_input(kind)
            field.value = record.name
            field.focus()

    @on(Button.Pressed, "#taxonomy-category-add")
    @on(Input.Submitted, "#taxonomy-category-input")
    def on_add_category(self) -> None:
        self.submit("Category")

    @on(Button.Pressed, "#taxonomy-tag-add")
    @on(Input.Submitted, "#taxonomy-tag-input")
    def on_add_tag(self) -> None:
        self.submit("Tag")

    @on(Button.Pressed, "#taxonomy-category-rename")
    def on_rename_category(self) -> None:
        self.submit_rename("Category")

    @on(Button.Pressed, "#taxonomy-tag-rename")
    def on_rename_tag(self) -> None:
        self.submit_rename("Tag")

    @on(Button.Pressed, "#taxonomy-category-delete")
    def on_delete_category(self) -> None:
        self.request_delete("Category")

    @on(Button.Pressed, "#taxonomy-tag-delete")
    def on_delete_tag(self) -> None:
        self.request_delete("Tag")

    @on(Button.Pressed, "#taxonomy-undo")
    def on_undo(self) -> None:
        self.post_message(self.UndoRequested())


__all__ = ["TAXONOMY_KINDS", "TaxonomyPanel"]
