"""Rich markup builders for the prompt view panel."""

from __future__ import annotations

from collections.abc import Sequence

from promptshare.models import GUEST_AUTHOR_LABEL, Category, Comment, Prompt, Result, Tag
from promptshare.query import NO_CONTENT_LABEL, display_author, escape_rich_text, truncate_text
from promptshare.themes import THEME_COLORS
from promptshare.widgets.listing import render_category_label, render_tag_labels

RESULT_PREVIEW_MAX_LEN = 300


def render_prompt_details(
    prompt: Prompt, categories: Sequence[Category], tags: Sequence[Tag]
) -> str:
    """Metadata header for the view panel; the body is rendered as markdown."""
    muted = THEME_COLORS["muted"]
    lines = [
        f"[bold {THEME_COLORS['accent']}]{escape_rich_text(prompt.title) or 'Untitled'}[/]",
        f"[{muted}]Category:[/] {render_category_label(prompt.category, categories)}",
    ]
    if prompt.tags:
        lines.append(f"[{muted}]Tags:[/] {render_tag_labels(prompt.tags, tags)}")
    author_line = f"[{muted}]Author:[/] {escape_rich_text(display_author(prompt.author))}"
    if prompt.created_at:
        author_line += f"  [{muted}]Created:[/] {escape_rich_text(prompt.created_at)}"
    lines.append(author_line)
    if prompt.description.strip():
        lines.append("")
        lines.append(f"[italic]{escape_rich_text(prompt.description.strip())}[/]")
    return "\n".join(lines)


def build_prompt_markdown(prompt: Prompt) -> str:
    """Prompt content as markdown source, with a placeholder when empty."""
    if not prompt.content.strip():
        return f"*{NO_CONTENT_LABEL}*"
    return prompt.content


def _render_feedback(author: str, content: str, max_len: int | None = None) -> str:
    body = content if max_len is None else truncate_text(content, max_len)
    who = escape_rich_text(author.strip() or GUEST_AUTHOR_LABEL)
    return f"[{THEME_COLORS['purple']}]User: {who}[/]\n{escape_rich_text(body)}"


def render_comment(comment: Comment) -> str:
    return _render_feedback(comment.author, comment.content)


def render_result(result: Result) -> str:
    return _render_feedback(result.author, result.content, RESULT_PREVIEW_MAX_LEN)


__all__ = [
    "RESULT_PREVIEW_MAX_LEN",
    "build_prompt_markdown",
    "render_comment",
    "render_prompt_details",
    "render_result",
]
