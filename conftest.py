"""Shared test fixtures for PromptShare tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from promptshare import (
    _HIGHLIGHT_PATTERN_CACHE,
    DEFAULT_THEME,
    THEME_COLORS,
    Category,
    Prompt,
    Tag,
    UserConfig,
)

# ── Module-level dict isolation ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_global_dicts():
    """Restore THEME_COLORS and clear the highlight cache after each test.

    PromptShareApp.__init__ and the theme action swap the active palette in
    place. Without this fixture one test's theme would leak into the next.
    """
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DEFAULT_THEME)
    _HIGHLIGHT_PATTERN_CACHE.clear()


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_prompt():
    """Factory fixture for creating Prompt instances with sensible defaults."""

    def _make(
        id: str = "1",
        title: str = "Test Prompt",
        content: str = "Write a haiku about testing.",
        description: str = "",
        category: str | None = None,
        tags: tuple[str, ...] | list[str] = (),
        author: str = "tester",
        created_at: str | None = None,
    ) -> Prompt:
        return Prompt(
            id=id,
            title=title,
            content=content,
            description=description,
            category=category,
            tags=tuple(tags),
            author=author,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_category():
    def _make(id: str = "c1", name: str = "Writing") -> Category:
        return Category(id=id, name=name)

    return _make


@pytest.fixture
def make_tag():
    def _make(id: str = "t1", name: str = "poetry") -> Tag:
        return Tag(id=id, name=name)

    return _make


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make


# ── Fake app for action modules ──────────────────────────────────────────────


@pytest.fixture
def fake_app():
    """SimpleNamespace stand-in for PromptShareApp with mocked services and panels.

    Action functions only touch the attributes listed here, so tests can
    drive them without mounting the Textual app.
    """
    from promptshare.query import FilterPipeline
    from promptshare.state import AppStateStore

    view_panel = MagicMock(name="view_panel")
    view_panel.prompt = None

    return SimpleNamespace(
        config=UserConfig(author_name="tester"),
        store=AppStateStore(),
        pipeline=FilterPipeline(2),
        modal_stack=MagicMock(name="modal_stack"),
        services=SimpleNamespace(
            prompts=SimpleNamespace(
                fetch_prompts=AsyncMock(return_value=[]),
                create_prompt=AsyncMock(return_value=None),
                update_prompt=AsyncMock(return_value=True),
                delete_prompt=AsyncMock(return_value=True),
                import_prompts=AsyncMock(),
            ),
            taxonomy=SimpleNamespace(
                fetch_categories=AsyncMock(return_value=[]),
                add_category=AsyncMock(),
                fetch_tags=AsyncMock(return_value=[]),
                add_tag=AsyncMock(),
                rename_category=AsyncMock(return_value=True),
                delete_category=AsyncMock(return_value=True),
                rename_tag=AsyncMock(return_value=True),
                delete_tag=AsyncMock(return_value=True),
            ),
            feedback=SimpleNamespace(
                fetch_comments=AsyncMock(return_value=[]),
                add_comment=AsyncMock(return_value=None),
                delete_comment=AsyncMock(return_value=True),
                fetch_results=AsyncMock(return_value=[]),
                add_result=AsyncMock(return_value=None),
                delete_result=AsyncMock(return_value=True),
            ),
        ),
        notify=MagicMock(name="notify"),
        confirm=AsyncMock(return_value=True),
        theme="monokai",
        _http_client=None,
        _load_generation=0,
        _last_deleted=None,
        _last_deleted_taxonomy=None,
        _last_page=None,
        _config_dirty=False,
        _set_loading=MagicMock(name="_set_loading"),
        _cancel_search_timer=MagicMock(name="_cancel_search_timer"),
        _refresh_list=MagicMock(name="_refresh_list"),
        # Close scheduled coroutines so they never leak "never awaited" warnings
        _track_task=MagicMock(name="_track_task", side_effect=lambda coro: coro.close()),
        _copy_to_clipboard=MagicMock(return_value=True),
        _get_highlighted_prompt=MagicMock(return_value=None),
        _get_view_panel=MagicMock(return_value=view_panel),
        _get_editor_panel=MagicMock(return_value=MagicMock(name="editor_panel")),
        _get_taxonomy_panel=MagicMock(return_value=MagicMock(name="taxonomy_panel")),
        _get_import_panel=MagicMock(return_value=MagicMock(name="import_panel")),
        _get_filter_bar=MagicMock(return_value=MagicMock(name="filter_bar")),
    )
