"""Prompt filtering, pagination, label resolution, and display text helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from rich.markup import escape as escape_markup

from promptshare.models import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_TAG_MATCH_MODE,
    DELETED_CATEGORY_LABEL,
    DELETED_TAG_LABEL,
    UNCATEGORIZED_LABEL,
    UNKNOWN_AUTHOR_LABEL,
    UNTITLED_LABEL,
    Category,
    FilterCriteria,
    Prompt,
    Tag,
)

ELLIPSIS = "…"

# Card display limits (max length, kept length when truncated)
TITLE_MAX_LEN = 48
TITLE_KEEP_LEN = 45
PREVIEW_MAX_LEN = 120
PREVIEW_KEEP_LEN = 117
DESCRIPTION_MAX_LEN = 80
DESCRIPTION_KEEP_LEN = 77

# Titles left over from placeholder input in old records
_PLACEHOLDER_TITLES = frozenset({"s", "1", "as"})

NO_CONTENT_LABEL = "No content added"


# ============================================================================
# Text Helpers
# ============================================================================


def truncate_text(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to max_len characters, adding suffix if truncated.

    Args:
        text: The text to truncate.
        max_len: Maximum length before truncation (not including suffix).
        suffix: String to append when truncated.

    Returns:
        Original text if within limit, otherwise truncated with suffix.
    """
    if len(text) <= max_len:
        return text
    return text[:max_len] + suffix


def _shorten(text: str, max_len: int, keep_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:keep_len] + ELLIPSIS


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


_HIGHLIGHT_PATTERN_CACHE: dict[tuple[str, ...], re.Pattern[str]] = {}


def highlight_text(text: str, terms: list[str], color: str) -> str:
    """Highlight terms inside text using Rich markup."""
    if not text:
        return text
    escaped_text = escape_rich_text(text)
    if not terms:
        return escaped_text
    normalized = []
    seen: set[str] = set()
    for term in terms:
        cleaned = term.strip()
        if len(cleaned) < 2:
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        normalized.append(cleaned)
    if not normalized:
        return escaped_text
    normalized.sort(key=len, reverse=True)
    cache_key = tuple(normalized)
    pattern = _HIGHLIGHT_PATTERN_CACHE.get(cache_key)
    if pattern is None:
        escaped_terms = [escape_rich_text(term) for term in normalized]
        pattern = re.compile("|".join(re.escape(term) for term in escaped_terms), re.IGNORECASE)
        _HIGHLIGHT_PATTERN_CACHE[cache_key] = pattern
    return pattern.sub(lambda match: f"[bold {color}]{match.group(0)}[/]", escaped_text)


# ============================================================================
# Label Resolution
# ============================================================================


def build_category_index(categories: Iterable[Category]) -> dict[str, Category]:
    return {c.id: c for c in categories}


def build_tag_index(tags: Iterable[Tag]) -> dict[str, Tag]:
    return {t.id: t for t in tags}


def resolve_category_label(category_id: str | None, categories: Iterable[Category]) -> str:
    """Return the category name, or a placeholder for unset/dangling ids."""
    if not category_id:
        return UNCATEGORIZED_LABEL
    category = build_category_index(categories).get(category_id)
    return category.name if category is not None else DELETED_CATEGORY_LABEL


def resolve_tag_labels(tag_ids: Iterable[str], tags: Iterable[Tag]) -> list[str]:
    """Return tag names in order, with a placeholder for each dangling id."""
    index = build_tag_index(tags)
    labels = []
    for tag_id in tag_ids:
        tag = index.get(tag_id)
        labels.append(tag.name if tag is not None else DELETED_TAG_LABEL)
    return labels


def display_title(title: str) -> str:
    """Return the card title, falling back for blank or placeholder titles."""
    cleaned = title.strip()
    if len(cleaned) < 2 or cleaned.lower() in _PLACEHOLDER_TITLES:
        return UNTITLED_LABEL
    return _shorten(cleaned, TITLE_MAX_LEN, TITLE_KEEP_LEN)


def preview_content(content: str) -> str:
    cleaned = content.strip()
    if not cleaned:
        return NO_CONTENT_LABEL
    return _shorten(cleaned, PREVIEW_MAX_LEN, PREVIEW_KEEP_LEN)


def preview_description(description: str) -> str:
    return _shorten(description.strip(), DESCRIPTION_MAX_LEN, DESCRIPTION_KEEP_LEN)


def display_author(author: str) -> str:
    return author.strip() or UNKNOWN_AUTHOR_LABEL


# ============================================================================
# Filtering
# ============================================================================


def _matches_search(
    prompt: Prompt,
    needle: str,
    category_index: dict[str, Category],
    tag_index: dict[str, Tag],
) -> bool:
    """Case-insensitive substring match over text and resolved labels."""
    haystacks = [prompt.title, prompt.content]
    if prompt.category:
        category = category_index.get(prompt.category)
        if category is not None:
            haystacks.append(category.name)
    for tag_id in prompt.tags:
        tag = tag_index.get(tag_id)
        if tag is not None:
            haystacks.append(tag.name)
    return any(needle in text.lower() for text in haystacks if text)


def _matches_tag(
    prompt: Prompt,
    tag_name: str,
    tag_index: dict[str, Tag],
    tag_match: str,
) -> bool:
    for tag_id in prompt.tags:
        if tag_id == tag_name:
            return True
        if tag_match == "id":
            continue
        tag = tag_index.get(tag_id)
        if tag is not None and tag.name == tag_name:
            return True
    return False


def filter_prompts(
    prompts: Sequence[Prompt],
    categories: Iterable[Category],
    tags: Iterable[Tag],
    criteria: FilterCriteria,
    *,
    tag_match: str = DEFAULT_TAG_MATCH_MODE,
) -> list[Prompt]:
    """Return the prompts matching every active criterion, in input order.

    Search, category and tag filters compose with AND. A blank search matches
    everything. With ``tag_match="id"`` the tag filter value is compared to
    raw tag ids only.
    """
    category_index = build_category_index(categories)
    tag_index = build_tag_index(tags)
    needle = criteria.search_query.strip().lower()
    result = []
    for prompt in prompts:
        if needle and not _matches_search(prompt, needle, category_index, tag_index):
            continue
        if criteria.category_id and prompt.category != criteria.category_id:
            continue
        if criteria.tag_name and not _matches_tag(prompt, criteria.tag_name, tag_index, tag_match):
            continue
        result.append(prompt)
    return result


# ============================================================================
# Pagination
# ============================================================================


@dataclass(frozen=True, slots=True)
class PageResult:
    """Visible slice of a filtered list and whether more remain."""

    visible: list[Prompt]
    has_more: bool
    total: int = 0


def paginate(
    filtered: Sequence[Prompt],
    shown_count: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PageResult:
    """Return ``filtered[: shown_count + page_size]`` and the load-more flag."""
    limit = max(0, shown_count) + max(1, page_size)
    return PageResult(
        visible=list(filtered[:limit]),
        has_more=limit < len(filtered),
        total=len(filtered),
    )


class PaginationState:
    """Load-more cursor over a filtered list.

    ``shown_count`` grows through :meth:`load_more`, drops back to 0 through
    :meth:`reset` and never exceeds the filtered length it was last given.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.shown_count = 0

    def load_more(self, filtered_len: int) -> int:
        self.shown_count = min(self.shown_count + self.page_size, max(0, filtered_len))
        return self.shown_count

    def clamp(self, filtered_len: int) -> int:
        """Pull the cursor back when the filtered list shrank below it."""
        self.shown_count = min(self.shown_count, max(0, filtered_len))
        return self.shown_count

    def reset(self) -> None:
        self.shown_count = 0


class FilterPipeline:
    """Filter criteria plus pagination cursor, as driven by the list UI.

    Any change to the criteria resets the cursor so the list starts from the
    first page again.
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        *,
        tag_match: str = DEFAULT_TAG_MATCH_MODE,
    ) -> None:
        self.criteria = FilterCriteria()
        self.pagination = PaginationState(page_size)
        self.tag_match = tag_match
        self._last_filtered_len = 0

    @property
    def shown_count(self) -> int:
        return self.pagination.shown_count

    def _set_criteria(self, criteria: FilterCriteria) -> None:
        self.criteria = criteria
        self.pagination.reset()

    def set_search_query(self, query: str) -> None:
        self._set_criteria(
            FilterCriteria(query, self.criteria.category_id, self.criteria.tag_name)
        )

    def set_category(self, category_id: str | None) -> None:
        self._set_criteria(
            FilterCriteria(self.criteria.search_query, category_id or None, self.criteria.tag_name)
        )

    def set_tag(self, tag_name: str | None) -> None:
        self._set_criteria(
            FilterCriteria(self.criteria.search_query, self.criteria.category_id, tag_name or None)
        )

    def clear_filters(self) -> None:
        """Drop category and tag filters; the search text is kept."""
        self._set_criteria(FilterCriteria(self.criteria.search_query))

    def clear_all(self) -> None:
        """Drop the search text and both filters."""
        self._set_criteria(self.criteria.cleared())

    def load_more(self) -> int:
        return self.pagination.load_more(self._last_filtered_len)

    def compute(
        self,
        prompts: Sequence[Prompt],
        categories: Iterable[Category],
        tags: Iterable[Tag],
    ) -> PageResult:
        filtered = filter_prompts(
            prompts, categories, tags, self.criteria, tag_match=self.tag_match
        )
        self._last_filtered_len = len(filtered)
        self.pagination.clamp(len(filtered))
        return paginate(filtered, self.pagination.shown_count, self.pagination.page_size)


# ============================================================================
# Summary / Empty-State Copy
# ============================================================================


def _category_name(category_id: str, categories: Iterable[Category]) -> str:
    category = build_category_index(categories).get(category_id)
    return category.name if category is not None else category_id


def build_filter_summary(criteria: FilterCriteria, categories: Iterable[Category]) -> str:
    """Describe the active filters in one line."""
    parts = []
    if criteria.category_id:
        parts.append(f"Category: {_category_name(criteria.category_id, categories)}")
    if criteria.tag_name:
        parts.append(f"Tag: {criteria.tag_name}")
    query = criteria.search_query.strip()
    if query:
        parts.append(f'Search: "{query}"')
    if not parts:
        return "Showing all prompts"
    return "Showing prompts in " + ", ".join(parts)


def build_empty_message(criteria: FilterCriteria, categories: Iterable[Category]) -> str:
    """Build the message shown when no prompt matches the filters."""
    if criteria.is_empty:
        return "No prompts yet.\nPress n to create one or i to import a batch."
    message = "No prompts found"
    query = criteria.search_query.strip()
    if query:
        message += f" for: {query}"
    if criteria.category_id:
        message += f" in category: {_category_name(criteria.category_id, categories)}"
    if criteria.tag_name:
        message += f" with tag: {criteria.tag_name}"
    return message + "\nTry adjusting your search or filter criteria."


def build_highlight_terms(criteria: FilterCriteria) -> list[str]:
    query = criteria.search_query.strip()
    return [query] if query else []


__all__ = [
    "DESCRIPTION_MAX_LEN",
    "ELLIPSIS",
    "NO_CONTENT_LABEL",
    "PREVIEW_MAX_LEN",
    "TITLE_MAX_LEN",
    "_HIGHLIGHT_PATTERN_CACHE",
    "FilterPipeline",
    "PageResult",
    "PaginationState",
    "build_category_index",
    "build_empty_message",
    "build_filter_summary",
    "build_highlight_terms",
    "build_tag_index",
    "display_author",
    "display_title",
    "escape_rich_text",
    "filter_prompts",
    "highlight_text",
    "paginate",
    "preview_content",
    "preview_description",
    "resolve_category_label",
    "resolve_tag_labels",
    "truncate_text",
]
