"""OptionList rendering helpers for prompt cards."""

from __future__ import annotations

from collections.abc import Sequence

from textual.widgets.option_list import Option

from promptshare.models import DELETED_CATEGORY_LABEL, DELETED_TAG_LABEL, Category, Prompt, Tag
from promptshare.query import (
    display_author,
    display_title,
    escape_rich_text,
    highlight_text,
    preview_content,
    preview_description,
    resolve_category_label,
    resolve_tag_labels,
)
from promptshare.themes import THEME_COLORS, get_tag_color


def render_category_label(category_id: str | None, categories: Sequence[Category]) -> str:
    label = resolve_category_label(category_id, categories)
    if label == DELETED_CATEGORY_LABEL:
        return f"[italic {THEME_COLORS['pink']}]{label}[/]"
    if not category_id:
        return f"[{THEME_COLORS['muted']}]{label}[/]"
    return f"[{THEME_COLORS['accent_alt']}]{escape_rich_text(label)}[/]"


def render_tag_labels(tag_ids: Sequence[str], tags: Sequence[Tag]) -> str:
    parts = []
    for label in resolve_tag_labels(tag_ids, tags):
        if label == DELETED_TAG_LABEL:
            parts.append(f"[italic {THEME_COLORS['pink']}]#{label}[/]")
        else:
            parts.append(f"[{get_tag_color(label)}]#{escape_rich_text(label)}[/]")
    return " ".join(parts)


def render_prompt_card(
    prompt: Prompt,
    categories: Sequence[Category],
    tags: Sequence[Tag],
    highlight_terms: list[str] | None = None,
) -> str:
    """Build the Rich markup for one prompt card (title, meta, preview, author)."""
    terms = highlight_terms or []
    accent = THEME_COLORS["accent"]
    title = highlight_text(display_title(prompt.title), terms, accent)
    lines = [f"[bold]{title}[/]"]

    meta = [render_category_label(prompt.category, categories)]
    tag_markup = render_tag_labels(prompt.tags, tags)
    if tag_markup:
        meta.append(tag_markup)
    lines.append("  ".join(meta))

    description = preview_description(prompt.description)
    if description:
        lines.append(f"[italic]{escape_rich_text(description)}[/]")
    preview = highlight_text(preview_content(prompt.content), terms, accent)
    lines.append(f"[{THEME_COLORS['muted']}]{preview}[/]")
    lines.append(f"[dim]by {escape_rich_text(display_author(prompt.author))}[/]")
    return "\n".join(lines)


LOAD_MORE_OPTION_ID = "load-more"


def render_load_more(remaining: int) -> str:
    return f"[bold {THEME_COLORS['accent']}]Load more ({remaining} remaining)[/] [dim]m[/]"


def build_prompt_options(
    visible: Sequence[Prompt],
    categories: Sequence[Category],
    tags: Sequence[Tag],
    *,
    remaining: int = 0,
    highlight_terms: list[str] | None = None,
) -> list[Option]:
    """OptionList rows for a page of prompts, plus a load-more row when needed.

    Option index ``i`` maps to ``visible[i]``; the load-more row, when present,
    is always last.
    """
    options = [
        Option(render_prompt_card(prompt, categories, tags, highlight_terms))
        for prompt in visible
    ]
    if remaining > 0:
        options.append(Option(render_load_more(remaining), id=LOAD_MORE_OPTION_ID))
    return options


__all__ = [
    "LOAD_MORE_OPTION_ID",
    "build_prompt_options",
    "render_category_label",
    "render_load_more",
    "render_prompt_card",
    "render_tag_labels",
]
