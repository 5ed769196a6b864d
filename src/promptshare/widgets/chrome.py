"""Widget chrome: filter bar, status line, and footer hints."""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.suggester import SuggestFromList
from textual.widgets import Input, Select, Static

from promptshare.models import Category, Tag
from promptshare.query import escape_rich_text
from promptshare.themes import THEME_COLORS


class FilterBar(Horizontal):
    """Search box plus category and tag selectors."""

    DEFAULT_CSS = """
    FilterBar {
        height: auto;
        padding: 0 1;
        background: $th-panel;
    }

    FilterBar #search-input {
        width: 2fr;
    }

    FilterBar Select {
        width: 1fr;
    }
    """

    def __init__(self, recent_searches: Sequence[str] = (), *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._recent_searches = list(recent_searches)

    def compose(self) -> ComposeResult:
        yield Input(
            placeholder=" Search title, content, category, tags",
            suggester=SuggestFromList(self._recent_searches, case_sensitive=False),
            id="search-input",
        )
        yield Select[str]([], prompt="All categories", id="category-filter")
        yield Select[str]([], prompt="All tags", id="tag-filter")

    def set_taxonomy(
        self,
        categories: Sequence[Category],
        tags: Sequence[Tag],
        *,
        tag_match: str = "name_or_id",
    ) -> None:
        """Refresh selector options; tag values are names unless matching by id."""
        self._replace_options(
            self.query_one("#category-filter", Select), [(c.name, c.id) for c in categories]
        )
        if tag_match == "id":
            tag_options = [(t.name, t.id) for t in tags]
        else:
            # Names can repeat across ids; one option per name
            seen: dict[str, str] = {}
            for t in tags:
                seen.setdefault(t.name, t.name)
            tag_options = [(name, name) for name in seen]
        self._replace_options(self.query_one("#tag-filter", Select), tag_options)

    @staticmethod
    def _replace_options(select: Select, options: list[tuple[str, str]]) -> None:
        current = select.value
        with select.prevent(Select.Changed):
            select.set_options(options)
            if isinstance(current, str) and any(value == current for _, value in options):
                select.value = current

    def reset(self, *, search: bool = False) -> None:
        """Clear both selectors, and the search box when ``search``, without change events."""
        for select_id in ("#category-filter", "#tag-filter"):
            select = self.query_one(select_id, Select)
            with select.prevent(Select.Changed):
                select.clear()
        if search:
            search_input = self.query_one("#search-input", Input)
            with search_input.prevent(Input.Changed):
                search_input.value = ""


class StatusBar(Static):
    """One-line filter summary and counts."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $th-panel-alt;
        color: $th-text;
    }
    """

    def show(self, summary: str, visible: int, total: int, *, loading: bool = False) -> None:
        muted = THEME_COLORS["muted"]
        parts = [escape_rich_text(summary), f"[{muted}]{visible} of {total}[/]"]
        if loading:
            parts.append(f"[{THEME_COLORS['orange']}]loading...[/]")
        self.update("  ".join(parts))


class ContextFooter(Static):
    """Context-sensitive footer showing relevant keybindings."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 1;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
        border-top: solid $th-panel-alt;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]]) -> None:
        """Update the footer with a list of (key, label) binding hints."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        parts = [
            f"[bold {accent}]{escape_rich_text(key)}[/] [{muted}]{label}[/]"
            for key, label in bindings
        ]
        self.update("  ".join(parts))


LIST_FOOTER_BINDINGS: list[tuple[str, str]] = [
    ("/", "search"),
    ("v", "view"),
    ("n", "new"),
    ("e", "edit"),
    ("d", "delete"),
    ("c", "copy"),
    ("m", "more"),
    ("?", "help"),
    ("q", "quit"),
]

MODAL_FOOTER_BINDINGS: list[tuple[str, str]] = [
    ("Tab", "next field"),
    ("Shift+Tab", "previous field"),
    ("Esc", "close dialog"),
]


__all__ = [
    "LIST_FOOTER_BINDINGS",
    "MODAL_FOOTER_BINDINGS",
    "ContextFooter",
    "FilterBar",
    "StatusBar",
]
