"""Pilot tests for the mounted PromptShareApp with fake backend services."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from textual.widgets import Input, OptionList

from promptshare.actions.library_actions import load_prompts
from promptshare.app import PromptShareApp
from promptshare.modals import (
    BatchImportPanel,
    ConfirmModal,
    HelpScreen,
    PromptEditorPanel,
    PromptViewPanel,
    TaxonomyPanel,
)
from promptshare.models import Category, Prompt, Tag, UserConfig
from promptshare.services.interfaces import AppServices


def _prompts(count: int) -> list[Prompt]:
    return [
        Prompt(
            id=str(i),
            title=f"Prompt number {i}",
            content=f"Body {i}",
            category="c1",
            tags=("t1",),
        )
        for i in range(1, count + 1)
    ]


def _services(prompts: list[Prompt]) -> AppServices:
    return AppServices(
        prompts=SimpleNamespace(
            fetch_prompts=AsyncMock(return_value=prompts),
            create_prompt=AsyncMock(return_value=None),
            update_prompt=AsyncMock(return_value=True),
            delete_prompt=AsyncMock(return_value=True),
            import_prompts=AsyncMock(),
        ),
        taxonomy=SimpleNamespace(
            fetch_categories=AsyncMock(return_value=[Category(id="c1", name="Writing")]),
            add_category=AsyncMock(),
            fetch_tags=AsyncMock(return_value=[Tag(id="t1", name="poetry")]),
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
    )


def _make_app(prompts: list[Prompt], *, page_size: int = 20, load_on_mount=False):
    return PromptShareApp(
        config=UserConfig(page_size=page_size),
        services=_services(prompts),
        load_on_mount=load_on_mount,
        persist=False,
    )


async def _loaded(app: PromptShareApp, pilot) -> None:
    await load_prompts(app)
    await pilot.pause()


@pytest.mark.asyncio
async def test_mount_loads_and_renders_prompts():
    app = _make_app(_prompts(3), load_on_mount=True)
    async with app.run_test() as pilot:
        await pilot.pause(0.1)
        option_list = app.query_one("#prompt-list", OptionList)
        assert option_list.option_count == 3
        assert app.store.get_categories()[0].name == "Writing"
        assert app.focused is option_list


@pytest.mark.asyncio
async def test_empty_library_shows_empty_message():
    app = _make_app([])
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        option_list = app.query_one("#prompt-list", OptionList)
        assert option_list.option_count == 1
        assert "No prompts yet" in str(option_list.get_option_at_index(0).prompt)


@pytest.mark.asyncio
async def test_load_more_reveals_next_page():
    app = _make_app(_prompts(5), page_size=2)
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        option_list = app.query_one("#prompt-list", OptionList)
        # 2 cards + load-more row
        assert option_list.option_count == 3

        await pilot.press("m")
        await pilot.pause()

        assert option_list.option_count == 5
        assert app._last_page is not None
        assert app._last_page.has_more is True


@pytest.mark.asyncio
async def test_search_filters_after_debounce():
    app = _make_app(_prompts(3))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        app.query_one("#search-input", Input).value = "body 2"
        await pilot.pause(0.4)

        assert [p.id for p in app._visible_prompts] == ["2"]
        assert app.pipeline.criteria.search_query == "body 2"


@pytest.mark.asyncio
async def test_clear_all_filters_empties_search_box():
    app = _make_app(_prompts(3))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        app.query_one("#search-input", Input).value = "body 2"
        await pilot.pause(0.4)

        app.action_clear_all_filters()
        await pilot.pause(0.4)

        assert app.query_one("#search-input", Input).value == ""
        assert app.pipeline.criteria.is_empty
        assert [p.id for p in app._visible_prompts] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_nested_panels_escape_closes_only_the_top():
    app = _make_app(_prompts(2))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        option_list = app.query_one("#prompt-list", OptionList)
        main = app.query_one("#main-container")

        await pilot.press("v")
        await pilot.pause()
        view = app.query_one(PromptViewPanel)
        assert app.modal_stack.active_modal is view
        assert view.prompt is not None and view.prompt.id == "1"
        assert main.disabled is True
        app.services.feedback.fetch_comments.assert_awaited_with(
            client=app._http_client, prompt_id="1"
        )

        view.action_request("edit")
        await pilot.pause()
        editor = app.query_one(PromptEditorPanel)
        assert app.modal_stack.stack == [view, editor]
        assert view.display is True
        assert view.inert is True
        assert editor.inert is False
        assert editor.z_index > view.z_index

        await pilot.press("escape")
        await pilot.pause()
        assert app.modal_stack.stack == [view]
        assert view.inert is False
        assert editor.display is False
        assert main.disabled is True

        await pilot.press("escape")
        await pilot.pause()
        assert app.modal_stack.depth == 0
        assert main.disabled is False
        assert app.focused is option_list
        assert app.store.get_current_prompt() is None


@pytest.mark.asyncio
async def test_list_actions_blocked_while_panel_open():
    app = _make_app(_prompts(2))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        await pilot.press("n")
        await pilot.pause()
        assert app.modal_stack.active_modal is app.query_one(PromptEditorPanel)
        assert app.check_action("new_prompt", ()) is False
        assert app.check_action("batch_import", ()) is False
        assert app.check_action("escape", ()) is True


@pytest.mark.asyncio
async def test_tab_stays_inside_active_panel():
    app = _make_app(_prompts(1))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        await pilot.press("t")
        await pilot.pause()
        panel = app.query_one(TaxonomyPanel)
        focusables = list(panel.focusable_widgets())
        assert focusables

        for _ in range(len(focusables) + 2):
            await pilot.press("tab")
            assert app.focused in panel.focusable_widgets()


@pytest.mark.asyncio
async def test_delete_confirm_then_refetch():
    app = _make_app(_prompts(2))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)

        await pilot.press("d")
        await pilot.pause()
        assert isinstance(app.screen, ConfirmModal)
        assert "Prompt number 1" in app.screen.message

        await pilot.press("y")
        await pilot.pause(0.1)

        app.services.prompts.delete_prompt.assert_awaited_once_with(
            client=app._http_client, prompt_id="1"
        )
        assert app.services.prompts.fetch_prompts.await_count == 2
        assert app._last_deleted is not None and app._last_deleted.id == "1"


@pytest.mark.asyncio
async def test_delete_cancel_leaves_backend_untouched():
    app = _make_app(_prompts(2))
    async with app.run_test() as pilot:
        await _loaded(app, pilot)

        await pilot.press("d")
        await pilot.pause()
        await pilot.press("n")
        await pilot.pause(0.1)

        app.services.prompts.delete_prompt.assert_not_awaited()
        assert not isinstance(app.screen, ConfirmModal)


@pytest.mark.asyncio
async def test_batch_import_panel_opens_reset():
    app = _make_app([])
    async with app.run_test() as pilot:
        await _loaded(app, pilot)
        await pilot.press("i")
        await pilot.pause()
        panel = app.query_one(BatchImportPanel)
        assert app.modal_stack.active_modal is panel
        assert panel.validation is None


@pytest.mark.asyncio
async def test_help_screen_opens_and_closes():
    app = _make_app([])
    async with app.run_test() as pilot:
        await pilot.press("question_mark")
        await pilot.pause()
        assert isinstance(app.screen, HelpScreen)
        await pilot.press("escape")
        await pilot.pause()
        assert not isinstance(app.screen, HelpScreen)
