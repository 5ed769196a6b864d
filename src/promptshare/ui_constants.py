"""Internal UI constants for the PromptShare app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

# Seconds between the last keystroke and re-filtering the list
SEARCH_DEBOUNCE_DELAY = 0.25

APP_CSS = """
Screen {
    background: $th-background;
    layers: default modal0 modal1 modal2 modal3 modal4 modal5;
    align: center middle;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
    width: 100%;
}

#main-container:disabled {
    tint: $th-background 30%;
}

#list-pane {
    height: 1fr;
    border: tall $th-highlight;
    background: $th-panel;
}

#list-pane:focus-within {
    border: tall $th-accent;
}

#list-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent;
    text-style: bold;
}

#prompt-list {
    height: 1fr;
    scrollbar-gutter: stable;
    background: $th-panel;
    scrollbar-background: $th-scrollbar-background;
    scrollbar-color: $th-scrollbar;
    scrollbar-color-hover: $th-scrollbar-hover;
    scrollbar-color-active: $th-scrollbar-active;
}

#prompt-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#prompt-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#prompt-list > .option-list--option-hover {
    background: $th-panel-alt;
}

#search-input {
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

VerticalScroll {
    scrollbar-background: $th-scrollbar-background;
    scrollbar-color: $th-scrollbar;
    scrollbar-color-hover: $th-scrollbar-hover;
    scrollbar-color-active: $th-scrollbar-active;
}
"""

# Actions that operate on the prompt list; blocked while a panel is open
LIST_ACTIONS: frozenset[str] = frozenset(
    {
        "focus_search",
        "view_prompt",
        "new_prompt",
        "edit_prompt",
        "delete_prompt",
        "copy_prompt",
        "undo_delete",
        "load_more",
        "clear_filters",
        "clear_all_filters",
        "refresh",
        "manage_taxonomy",
        "batch_import",
        "cursor_down",
        "cursor_up",
        "cycle_theme",
    }
)

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit", show=False),
    Binding("slash", "focus_search", "Search", show=False),
    Binding("escape", "escape", "Close / Clear", show=False),
    Binding("v", "view_prompt", "View", show=False),
    Binding("n", "new_prompt", "New", show=False),
    Binding("e", "edit_prompt", "Edit", show=False),
    Binding("d", "delete_prompt", "Delete", show=False),
    Binding("c", "copy_prompt", "Copy", show=False),
    Binding("u", "undo_delete", "Undo Delete", show=False),
    Binding("m", "load_more", "Load More", show=False),
    Binding("x", "clear_filters", "Clear Filters", show=False),
    Binding("X", "clear_all_filters", "Clear All", show=False),
    Binding("r", "refresh", "Refresh", show=False),
    Binding("t", "manage_taxonomy", "Tags & Categories", show=False),
    Binding("i", "batch_import", "Import", show=False),
    Binding("j", "cursor_down", "Down", show=False),
    Binding("k", "cursor_up", "Up", show=False),
    Binding("ctrl+t", "cycle_theme", "Theme", show=False),
    Binding("question_mark", "show_help", "Help", show=False),
]


__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "LIST_ACTIONS",
    "SEARCH_DEBOUNCE_DELAY",
]
