"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from promptshare.models import (
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    Category,
    Comment,
    Prompt,
    Result,
    Tag,
    UserConfig,
)
from promptshare.services import prompt_api_service as _api
from promptshare.services.prompt_api_service import ImportSummary


@runtime_checkable
class PromptService(Protocol):
    """Interface for prompt CRUD and batch import."""

    async def fetch_prompts(
        self, *, client: httpx.AsyncClient | None, params: dict[str, Any] | None = None
    ) -> list[Prompt]:
        """Fetch every prompt visible to the user."""
        ...

    async def create_prompt(
        self, *, client: httpx.AsyncClient | None, data: dict[str, Any]
    ) -> Prompt | None:
        """Create a prompt and return the stored record if echoed."""
        ...

    async def update_prompt(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, data: dict[str, Any]
    ) -> bool:
        """Update an existing prompt."""
        ...

    async def delete_prompt(self, *, client: httpx.AsyncClient | None, prompt_id: str) -> bool:
        """Delete a prompt by id."""
        ...

    async def import_prompts(
        self, *, client: httpx.AsyncClient | None, prompts: list[dict[str, Any]]
    ) -> ImportSummary:
        """Import a validated batch of prompts."""
        ...


@runtime_checkable
class TaxonomyService(Protocol):
    """Interface for category and tag management."""

    async def fetch_categories(self, *, client: httpx.AsyncClient | None) -> list[Category]: ...

    async def add_category(self, *, client: httpx.AsyncClient | None, name: str) -> Category: ...

    async def fetch_tags(self, *, client: httpx.AsyncClient | None) -> list[Tag]: ...

    async def add_tag(self, *, client: httpx.AsyncClient | None, name: str) -> Tag: ...

    async def rename_category(
        self, *, client: httpx.AsyncClient | None, category_id: str, name: str
    ) -> bool: ...

    async def delete_category(
        self, *, client: httpx.AsyncClient | None, category_id: str
    ) -> bool: ...

    async def rename_tag(
        self, *, client: httpx.AsyncClient | None, tag_id: str, name: str
    ) -> bool: ...

    async def delete_tag(self, *, client: httpx.AsyncClient | None, tag_id: str) -> bool: ...


@runtime_checkable
class FeedbackService(Protocol):
    """Interface for per-prompt comments and results."""

    async def fetch_comments(
        self, *, client: httpx.AsyncClient | None, prompt_id: str
    ) -> list[Comment]: ...

    async def add_comment(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, content: str, author: str = ""
    ) -> Comment | None: ...

    async def delete_comment(self, *, client: httpx.AsyncClient | None, comment_id: str) -> bool: ...

    async def fetch_results(
        self, *, client: httpx.AsyncClient | None, prompt_id: str
    ) -> list[Result]: ...

    async def add_result(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, content: str, author: str = ""
    ) -> Result | None: ...

    async def delete_result(self, *, client: httpx.AsyncClient | None, result_id: str) -> bool: ...


class _EndpointAdapter:
    """Holds the backend location shared by the default adapters."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds


class DefaultPromptService(_EndpointAdapter):
    """Default adapter that delegates to function-based prompt API helpers."""

    async def fetch_prompts(
        self, *, client: httpx.AsyncClient | None, params: dict[str, Any] | None = None
    ) -> list[Prompt]:
        return await _api.fetch_prompts(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            params=params,
        )

    async def create_prompt(
        self, *, client: httpx.AsyncClient | None, data: dict[str, Any]
    ) -> Prompt | None:
        return await _api.create_prompt(
            client=client, base_url=self.base_url, timeout_seconds=self.timeout_seconds, data=data
        )

    async def update_prompt(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, data: dict[str, Any]
    ) -> bool:
        return await _api.update_prompt(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
            data=data,
        )

    async def delete_prompt(self, *, client: httpx.AsyncClient | None, prompt_id: str) -> bool:
        return await _api.delete_prompt(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
        )

    async def import_prompts(
        self, *, client: httpx.AsyncClient | None, prompts: list[dict[str, Any]]
    ) -> ImportSummary:
        return await _api.import_prompts(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompts=prompts,
        )


class DefaultTaxonomyService(_EndpointAdapter):
    """Default adapter that delegates to function-based category/tag helpers."""

    async def fetch_categories(self, *, client: httpx.AsyncClient | None) -> list[Category]:
        return await _api.fetch_categories(
            client=client, base_url=self.base_url, timeout_seconds=self.timeout_seconds
        )

    async def add_category(self, *, client: httpx.AsyncClient | None, name: str) -> Category:
        return await _api.add_category(
            client=client, base_url=self.base_url, timeout_seconds=self.timeout_seconds, name=name
        )

    async def fetch_tags(self, *, client: httpx.AsyncClient | None) -> list[Tag]:
        return await _api.fetch_tags(
            client=client, base_url=self.base_url, timeout_seconds=self.timeout_seconds
        )

    async def add_tag(self, *, client: httpx.AsyncClient | None, name: str) -> Tag:
        return await _api.add_tag(
            client=client, base_url=self.base_url, timeout_seconds=self.timeout_seconds, name=name
        )

    async def rename_category(
        self, *, client: httpx.AsyncClient | None, category_id: str, name: str
    ) -> bool:
        return await _api.rename_category(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            category_id=category_id,
            name=name,
        )

    async def delete_category(self, *, client: httpx.AsyncClient | None, category_id: str) -> bool:
        return await _api.delete_category(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            category_id=category_id,
        )

    async def rename_tag(
        self, *, client: httpx.AsyncClient | None, tag_id: str, name: str
    ) -> bool:
        return await _api.rename_tag(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            tag_id=tag_id,
            name=name,
        )

    async def delete_tag(self, *, client: httpx.AsyncClient | None, tag_id: str) -> bool:
        return await _api.delete_tag(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            tag_id=tag_id,
        )


class DefaultFeedbackService(_EndpointAdapter):
    """Default adapter that delegates to function-based comment/result helpers."""

    async def fetch_comments(
        self, *, client: httpx.AsyncClient | None, prompt_id: str
    ) -> list[Comment]:
        return await _api.fetch_comments(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
        )

    async def add_comment(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, content: str, author: str = ""
    ) -> Comment | None:
        return await _api.add_comment(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
            content=content,
            author=author,
        )

    async def delete_comment(self, *, client: httpx.AsyncClient | None, comment_id: str) -> bool:
        return await _api.delete_comment(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            comment_id=comment_id,
        )

    async def fetch_results(
        self, *, client: httpx.AsyncClient | None, prompt_id: str
    ) -> list[Result]:
        return await _api.fetch_results(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
        )

    async def add_result(
        self, *, client: httpx.AsyncClient | None, prompt_id: str, content: str, author: str = ""
    ) -> Result | None:
        return await _api.add_result(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            prompt_id=prompt_id,
            content=content,
            author=author,
        )

    async def delete_result(self, *, client: httpx.AsyncClient | None, result_id: str) -> bool:
        return await _api.delete_result(
            client=client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            result_id=result_id,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    prompts: PromptService
    taxonomy: TaxonomyService
    feedback: FeedbackService


def build_default_app_services(config: UserConfig | None = None) -> AppServices:
    """Build default app services pointed at the configured backend."""
    config = config or UserConfig()
    base_url = config.base_url
    timeout = config.request_timeout_seconds
    return AppServices(
        prompts=DefaultPromptService(base_url, timeout),
        taxonomy=DefaultTaxonomyService(base_url, timeout),
        feedback=DefaultFeedbackService(base_url, timeout),
    )


__all__ = [
    "AppServices",
    "DefaultFeedbackService",
    "DefaultPromptService",
    "DefaultTaxonomyService",
    "FeedbackService",
    "PromptService",
    "TaxonomyService",
    "build_default_app_services",
]
