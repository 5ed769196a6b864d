"""Input validation for prompts, taxonomy names, and batch imports."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from rapidfuzz import fuzz

from promptshare.models import MAX_TAXONOMY_NAME_LENGTH

# Minimum rapidfuzz ratio for a name to count as "similar"
SIMILAR_NAME_THRESHOLD = 80


# ============================================================================
# Tag / Category Names
# ============================================================================


def validate_taxonomy_name(name: str, kind: str) -> str | None:
    """Return an error message for an invalid tag/category name, else None.

    ``kind`` is the user-facing record type, e.g. ``"Tag"`` or ``"Category"``.
    """
    cleaned = name.strip()
    if not cleaned:
        return f"{kind} name cannot be empty"
    if len(cleaned) > MAX_TAXONOMY_NAME_LENGTH:
        return f"{kind} name too long"
    if "," in cleaned:
        return f"No commas allowed in {kind.lower()} names"
    return None


def find_duplicate_name(name: str, existing: Iterable[str]) -> str | None:
    """Return the existing name equal to ``name`` ignoring case, if any."""
    key = name.strip().casefold()
    for candidate in existing:
        if candidate.casefold() == key:
            return candidate
    return None


def suggest_similar_names(
    name: str,
    existing: Iterable[str],
    *,
    limit: int = 3,
    threshold: int = SIMILAR_NAME_THRESHOLD,
) -> list[str]:
    """Return existing names that look like near-duplicates of ``name``."""
    query = name.strip().lower()
    if not query:
        return []
    scored: list[tuple[float, str]] = []
    for candidate in existing:
        lowered = candidate.lower()
        if lowered == query:
            continue
        score = fuzz.ratio(query, lowered)
        if score >= threshold:
            scored.append((score, candidate))
    scored.sort(key=lambda x: x[0], reverse=True)
    return [candidate for _, candidate in scored[:limit]]


def parse_tag_names(raw: str) -> list[str]:
    """Split a comma-separated tag field, dropping blanks and duplicates."""
    names: list[str] = []
    seen: set[str] = set()
    for part in raw.split(","):
        cleaned = part.strip()
        if cleaned and cleaned.casefold() not in seen:
            seen.add(cleaned.casefold())
            names.append(cleaned)
    return names


# ============================================================================
# Prompt Fields
# ============================================================================


def validate_prompt_fields(title: str, content: str) -> list[str]:
    """Return the editor's blocking errors (empty when the prompt can be saved)."""
    errors = []
    if not title.strip():
        errors.append("Title is required")
    if not content.strip():
        errors.append("Content is required")
    return errors


def prompt_from_text_file(text: str) -> dict[str, str]:
    """Turn a plain-text file into prompt fields: first line title, rest content."""
    lines = text.replace("\r\n", "\n").split("\n")
    title = lines[0].strip() if lines else ""
    content = "\n".join(lines[1:]).strip()
    return {"title": title, "content": content}


# ============================================================================
# Batch Import
# ============================================================================


class ImportParseError(ValueError):
    """Raised when batch import text is not JSON prompt data."""


@dataclass(slots=True)
class ImportValidation:
    """Per-batch validation result."""

    valid: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    invalid_count: int = 0

    @property
    def summary(self) -> str:
        return f"Valid: {len(self.valid)}, Invalid: {self.invalid_count}"


def parse_import_text(text: str) -> list[Any]:
    """Parse pasted/loaded batch import JSON.

    Accepts a list of prompts, a single prompt object, or ``{"prompts": [...]}``.

    Raises:
        ImportParseError: If the text is not valid JSON of a supported shape.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportParseError(f"Invalid JSON: {exc.msg} (line {exc.lineno})") from exc
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        nested = data.get("prompts")
        if isinstance(nested, list):
            return nested
        return [data]
    raise ImportParseError("Input is not a JSON array.")


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_import_batch(items: list[Any]) -> ImportValidation:
    """Check every item has title, content, category and a tags list."""
    result = ImportValidation()
    for index, item in enumerate(items, start=1):
        problems = []
        if not isinstance(item, dict):
            problems.append("Not an object")
            item = {}
        if not _non_empty_str(item.get("title")):
            problems.append("Missing/invalid title")
        if not _non_empty_str(item.get("content")):
            problems.append("Missing/invalid content")
        if not _non_empty_str(item.get("category")):
            problems.append("Missing/invalid category")
        if not isinstance(item.get("tags"), list):
            problems.append("Missing/invalid tags")
        if problems:
            result.invalid_count += 1
            result.errors.append(f"Prompt {index}: {', '.join(problems)}")
        else:
            result.valid.append(item)
    return result


__all__ = [
    "SIMILAR_NAME_THRESHOLD",
    "ImportParseError",
    "ImportValidation",
    "find_duplicate_name",
    "parse_import_text",
    "parse_tag_names",
    "prompt_from_text_file",
    "suggest_similar_names",
    "validate_import_batch",
    "validate_prompt_fields",
    "validate_taxonomy_name",
]
