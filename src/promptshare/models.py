"""Data models and constants for the promptshare application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Application identity — single source of truth for platformdirs config paths
CONFIG_APP_NAME = "promptshare"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200

# Placeholder labels for dangling or missing references
DELETED_TAG_LABEL = "Deleted Tag"
DELETED_CATEGORY_LABEL = "Deleted Category"
UNCATEGORIZED_LABEL = "Uncategorized"
UNTITLED_LABEL = "Untitled"
UNKNOWN_AUTHOR_LABEL = "Unknown"
GUEST_AUTHOR_LABEL = "Guest"

# Tag and category names
MAX_TAXONOMY_NAME_LENGTH = 32
TAXONOMY_KINDS = ("Category", "Tag")

# Tag filter matching: by tag name with raw-id fallback, or by id only
TAG_MATCH_MODES = ("name_or_id", "id")
DEFAULT_TAG_MATCH_MODE = "name_or_id"

# Modal stacking
MODAL_BASE_Z = 1000
MODAL_Z_STEP = 10

# Backend defaults
DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15


def _as_id(value: Any) -> str | None:
    """Normalize a backend id (int or str) to a string; empty means missing."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _parse_tag_ids(raw: Any) -> tuple[str, ...]:
    """Accept a list of ids or the comma-joined string some endpoints return."""
    if isinstance(raw, str):
        items: list[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        return ()
    ids = []
    for item in items:
        tag_id = _as_id(item)
        if tag_id is not None:
            ids.append(tag_id)
    return tuple(ids)


@dataclass(frozen=True, slots=True)
class Category:
    """A named prompt category."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Category:
        return cls(id=_as_id(data.get("id")) or "", name=_as_text(data.get("name")))


@dataclass(frozen=True, slots=True)
class Tag:
    """A named prompt tag. Names never contain commas."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Tag:
        return cls(id=_as_id(data.get("id")) or "", name=_as_text(data.get("name")))


@dataclass(frozen=True, slots=True)
class Prompt:
    """A user-authored prompt record.

    ``category`` and ``tags`` hold ids that may reference records which no
    longer exist; those are rendered as placeholders, never purged.
    """

    id: str
    title: str
    content: str
    description: str = ""
    category: str | None = None
    tags: tuple[str, ...] = ()
    author: str = ""
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Prompt:
        """Build a Prompt from a backend record.

        Older records store the body under ``prompt`` instead of ``content``.
        """
        content = data.get("content")
        if not isinstance(content, str):
            content = _as_text(data.get("prompt"))
        created = data.get("created_at")
        return cls(
            id=_as_id(data.get("id")) or "",
            title=_as_text(data.get("title")),
            content=content,
            description=_as_text(data.get("description")),
            category=_as_id(data.get("category")),
            tags=_parse_tag_ids(data.get("tags")),
            author=_as_text(data.get("author")),
            created_at=str(created) if created is not None else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize the editable fields for create/update requests."""
        return {
            "title": self.title,
            "content": self.content,
            "description": self.description,
            "category": self.category or "",
            "tags": list(self.tags),
            "author": self.author,
        }


@dataclass(frozen=True, slots=True)
class Comment:
    """A comment attached to a prompt."""

    id: str
    prompt_id: str
    content: str
    author: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any], prompt_id: str = "") -> Comment:
        return cls(
            id=_as_id(data.get("id")) or "",
            prompt_id=_as_id(data.get("prompt_id")) or prompt_id,
            content=_as_text(data.get("content")),
            author=_as_text(data.get("author")),
        )


@dataclass(frozen=True, slots=True)
class Result:
    """A recorded model output ("result") attached to a prompt."""

    id: str
    prompt_id: str
    content: str
    author: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any], prompt_id: str = "") -> Result:
        return cls(
            id=_as_id(data.get("id")) or "",
            prompt_id=_as_id(data.get("prompt_id")) or prompt_id,
            content=_as_text(data.get("content")),
            author=_as_text(data.get("author")),
        )


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Transient list filter owned by the UI layer.

    ``tag_name`` matches tag names (with raw-id fallback), unlike every other
    tag reference in the app which uses ids.
    """

    search_query: str = ""
    category_id: str | None = None
    tag_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.search_query.strip() and not self.category_id and not self.tag_name

    def cleared(self) -> FilterCriteria:
        return FilterCriteria()


@dataclass(frozen=True, slots=True)
class AppState:
    """Immutable snapshot of the store, delivered to subscribers."""

    categories: tuple[Category, ...] = ()
    tags: tuple[Tag, ...] = ()
    prompts: tuple[Prompt, ...] = ()
    current_prompt: Prompt | None = None


@dataclass(slots=True)
class UserConfig:
    """User configuration persisted between sessions."""

    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    tag_match_mode: str = DEFAULT_TAG_MATCH_MODE
    theme_name: str = "monokai"
    author_name: str = ""
    recent_searches: list[str] = field(default_factory=list)
    version: int = 1
    config_defaulted: bool = False  # Runtime flag: True when load fell back to defaults

    def __post_init__(self) -> None:
        """Clamp page_size and tag_match_mode to valid values."""
        if self.page_size < 1 or self.page_size > MAX_PAGE_SIZE:
            self.page_size = DEFAULT_PAGE_SIZE
        if self.tag_match_mode not in TAG_MATCH_MODES:
            self.tag_match_mode = DEFAULT_TAG_MATCH_MODE


__all__ = [
    "CONFIG_APP_NAME",
    "DEFAULT_BASE_URL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "DEFAULT_TAG_MATCH_MODE",
    "DELETED_CATEGORY_LABEL",
    "DELETED_TAG_LABEL",
    "GUEST_AUTHOR_LABEL",
    "MAX_PAGE_SIZE",
    "MAX_TAXONOMY_NAME_LENGTH",
    "MODAL_BASE_Z",
    "MODAL_Z_STEP",
    "TAG_MATCH_MODES",
    "TAXONOMY_KINDS",
    "UNCATEGORIZED_LABEL",
    "UNKNOWN_AUTHOR_LABEL",
    "UNTITLED_LABEL",
    "AppState",
    "Category",
    "Comment",
    "FilterCriteria",
    "Prompt",
    "Result",
    "Tag",
    "UserConfig",
]
