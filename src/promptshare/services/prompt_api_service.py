"""Async HTTP helpers for the prompt backend (prompts, taxonomy, comments, results)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from promptshare.models import Category, Comment, Prompt, Result, Tag

logger = logging.getLogger(__name__)

PROMPTS_PATH = "/api/prompts.php"
CATEGORIES_PATH = "/api/categories.php"
TAGS_PATH = "/api/tags.php"
COMMENTS_PATH = "/api/comments.php"
RESULTS_PATH = "/api/results.php"

USER_AGENT = "promptshare/1.0"


class ApiError(Exception):
    """Backend answered 2xx but the body was malformed or reported failure."""


@dataclass(slots=True)
class ImportSummary:
    """Outcome of a batch import request."""

    imported_count: int = 0
    skipped_count: int = 0
    errors: list[str] = field(default_factory=list)


def _url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


async def _request(
    client: httpx.AsyncClient | None,
    method: str,
    url: str,
    *,
    timeout_seconds: int,
    params: dict[str, Any] | None = None,
    json_body: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Send one request and return the decoded JSON object.

    Raises:
        httpx.HTTPStatusError: For non-2xx responses.
        ApiError: When the body is not a JSON object or has ``ok: false``.
    """
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if client is not None:
        response = await client.request(
            method,
            url,
            params=params,
            json=json_body,
            headers=headers,
            timeout=timeout_seconds,
        )
    else:
        async with httpx.AsyncClient() as tmp_client:
            response = await tmp_client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=timeout_seconds,
            )

    logger.debug("%s %s -> %s", method, url, response.status_code)
    response.raise_for_status()
    try:
        data = response.json()
    except ValueError as exc:
        raise ApiError(f"Invalid JSON from {url}") from exc
    if not isinstance(data, dict):
        raise ApiError(f"Unexpected response shape from {url}")
    if data.get("ok") is False:
        raise ApiError(str(data.get("error") or "Request failed"))
    return data


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ApiError(f"Expected a list under '{key}'")
    return [item for item in raw if isinstance(item, dict)]


# ============================================================================
# Prompts
# ============================================================================


async def fetch_prompts(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    params: dict[str, Any] | None = None,
) -> list[Prompt]:
    data = await _request(
        client,
        "GET",
        _url(base_url, PROMPTS_PATH),
        params=params or None,
        timeout_seconds=timeout_seconds,
    )
    return [Prompt.from_api(item) for item in _records(data, "prompts")]


async def create_prompt(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    data: dict[str, Any],
) -> Prompt | None:
    """Create a prompt and return the stored record when the backend echoes it."""
    body = await _request(
        client,
        "POST",
        _url(base_url, PROMPTS_PATH),
        json_body={"action": "create", **data},
        timeout_seconds=timeout_seconds,
    )
    created = body.get("prompt")
    return Prompt.from_api(created) if isinstance(created, dict) else None


async def update_prompt(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    prompt_id: str,
    data: dict[str, Any],
) -> bool:
    body = await _request(
        client,
        "POST",
        _url(base_url, PROMPTS_PATH),
        json_body={"action": "update", "id": prompt_id, **data},
        timeout_seconds=timeout_seconds,
    )
    return bool(body.get("ok", True))


async def delete_prompt(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    prompt_id: str,
) -> bool:
    body = await _request(
        client,
        "POST",
        _url(base_url, PROMPTS_PATH),
        json_body={"action": "delete", "id": prompt_id},
        timeout_seconds=timeout_seconds,
    )
    return bool(body.get("ok", True))


async def import_prompts(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    prompts: list[dict[str, Any]],
) -> ImportSummary:
    body = await _request(
        client,
        "POST",
        _url(base_url, PROMPTS_PATH),
        json_body={"action": "import", "prompts": prompts},
        timeout_seconds=timeout_seconds,
    )
    imported = body.get("imported")
    skipped = body.get("skipped")
    errors = body.get("errors")
    imported_count = body.get("imported_count")
    skipped_count = body.get("skipped_count")
    return ImportSummary(
        imported_count=(
            imported_count
            if isinstance(imported_count, int)
            else len(imported) if isinstance(imported, list) else 0
        ),
        skipped_count=(
            skipped_count
            if isinstance(skipped_count, int)
            else len(skipped) if isinstance(skipped, list) else 0
        ),
        errors=[str(e) for e in errors] if isinstance(errors, list) else [],
    )


# ============================================================================
# Categories / Tags
# ============================================================================


async def fetch_categories(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int
) -> list[Category]:
    data = await _request(
        client, "GET", _url(base_url, CATEGORIES_PATH), timeout_seconds=timeout_seconds
    )
    return [Category.from_api(item) for item in _records(data, "categories")]


async def add_category(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, name: str
) -> Category:
    data = await _request(
        client,
        "POST",
        _url(base_url, CATEGORIES_PATH),
        json_body={"name": name},
        timeout_seconds=timeout_seconds,
    )
    created = data.get("category")
    if not isinstance(created, dict):
        raise ApiError("Category was not returned by the server")
    return Category.from_api(created)


async def fetch_tags(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int
) -> list[Tag]:
    data = await _request(client, "GET", _url(base_url, TAGS_PATH), timeout_seconds=timeout_seconds)
    return [Tag.from_api(item) for item in _records(data, "tags")]


async def add_tag(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, name: str
) -> Tag:
    data = await _request(
        client,
        "POST",
        _url(base_url, TAGS_PATH),
        json_body={"name": name},
        timeout_seconds=timeout_seconds,
    )
    created = data.get("tag")
    if not isinstance(created, dict):
        raise ApiError("Tag was not returned by the server")
    return Tag.from_api(created)


async def _rename_record(
    client: httpx.AsyncClient | None,
    url: str,
    *,
    timeout_seconds: int,
    record_id: str,
    name: str,
) -> bool:
    data = await _request(
        client,
        "PUT",
        url,
        params={"id": record_id},
        json_body={"name": name},
        timeout_seconds=timeout_seconds,
    )
    return bool(data.get("ok", True))


async def _delete_record(
    client: httpx.AsyncClient | None, url: str, *, timeout_seconds: int, record_id: str
) -> bool:
    data = await _request(
        client, "DELETE", url, params={"id": record_id}, timeout_seconds=timeout_seconds
    )
    return bool(data.get("ok", True))


async def rename_category(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    category_id: str,
    name: str,
) -> bool:
    return await _rename_record(
        client,
        _url(base_url, CATEGORIES_PATH),
        timeout_seconds=timeout_seconds,
        record_id=category_id,
        name=name,
    )


async def delete_category(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, category_id: str
) -> bool:
    """Delete a category. Prompts keep the id and render it as deleted."""
    return await _delete_record(
        client,
        _url(base_url, CATEGORIES_PATH),
        timeout_seconds=timeout_seconds,
        record_id=category_id,
    )


async def rename_tag(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    tag_id: str,
    name: str,
) -> bool:
    return await _rename_record(
        client,
        _url(base_url, TAGS_PATH),
        timeout_seconds=timeout_seconds,
        record_id=tag_id,
        name=name,
    )


async def delete_tag(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, tag_id: str
) -> bool:
    return await _delete_record(
        client, _url(base_url, TAGS_PATH), timeout_seconds=timeout_seconds, record_id=tag_id
    )


# ============================================================================
# Comments / Results
# ============================================================================


async def fetch_comments(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, prompt_id: str
) -> list[Comment]:
    data = await _request(
        client,
        "GET",
        _url(base_url, COMMENTS_PATH),
        params={"promptId": prompt_id},
        timeout_seconds=timeout_seconds,
    )
    return [Comment.from_api(item, prompt_id) for item in _records(data, "comments")]


async def add_comment(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    prompt_id: str,
    content: str,
    author: str = "",
) -> Comment | None:
    data = await _request(
        client,
        "POST",
        _url(base_url, COMMENTS_PATH),
        json_body={"action": "add", "prompt_id": prompt_id, "content": content, "author": author},
        timeout_seconds=timeout_seconds,
    )
    created = data.get("comment")
    return Comment.from_api(created, prompt_id) if isinstance(created, dict) else None


async def delete_comment(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, comment_id: str
) -> bool:
    data = await _request(
        client,
        "DELETE",
        _url(base_url, COMMENTS_PATH),
        params={"id": comment_id},
        timeout_seconds=timeout_seconds,
    )
    return bool(data.get("ok", True))


async def fetch_results(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, prompt_id: str
) -> list[Result]:
    data = await _request(
        client,
        "GET",
        _url(base_url, RESULTS_PATH),
        params={"prompt_id": prompt_id},
        timeout_seconds=timeout_seconds,
    )
    return [Result.from_api(item, prompt_id) for item in _records(data, "results")]


async def add_result(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: int,
    prompt_id: str,
    content: str,
    author: str = "",
) -> Result | None:
    data = await _request(
        client,
        "POST",
        _url(base_url, RESULTS_PATH),
        json_body={"action": "add", "prompt_id": prompt_id, "content": content, "author": author},
        timeout_seconds=timeout_seconds,
    )
    created = data.get("result")
    return Result.from_api(created, prompt_id) if isinstance(created, dict) else None


async def delete_result(
    *, client: httpx.AsyncClient | None, base_url: str, timeout_seconds: int, result_id: str
) -> bool:
    data = await _request(
        client,
        "DELETE",
        _url(base_url, RESULTS_PATH),
        params={"id": result_id},
        timeout_seconds=timeout_seconds,
    )
    return bool(data.get("ok", True))


__all__ = [
    "CATEGORIES_PATH",
    "COMMENTS_PATH",
    "PROMPTS_PATH",
    "RESULTS_PATH",
    "TAGS_PATH",
    "ApiError",
    "ImportSummary",
    "add_category",
    "add_comment",
    "add_result",
    "add_tag",
    "create_prompt",
    "delete_category",
    "delete_comment",
    "delete_prompt",
    "delete_result",
    "delete_tag",
    "fetch_categories",
    "fetch_comments",
    "fetch_prompts",
    "fetch_results",
    "fetch_tags",
    "import_prompts",
    "rename_category",
    "rename_tag",
    "update_prompt",
]
