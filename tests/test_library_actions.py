"""Tests for loading, filtering, taxonomy, import and theme actions."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from promptshare.actions import library_actions
from promptshare.query import PageResult
from promptshare.services.prompt_api_service import ApiError, ImportSummary


def _messages(app) -> list[str]:
    return [call.args[0] for call in app.notify.call_args_list]


# ============================================================================
# Loading
# ============================================================================


class TestLoadPrompts:
    @pytest.mark.asyncio
    async def test_publishes_all_collections(self, fake_app, make_prompt, make_category, make_tag):
        fake_app.services.prompts.fetch_prompts.return_value = [make_prompt()]
        fake_app.services.taxonomy.fetch_categories.return_value = [make_category()]
        fake_app.services.taxonomy.fetch_tags.return_value = [make_tag()]
        states = []
        fake_app.store.subscribe(states.append)
        states.clear()

        assert await library_actions.load_prompts(fake_app) is True

        assert len(states) == 1
        assert len(states[0].prompts) == 1
        assert states[0].categories[0].name == "Writing"
        assert states[0].tags[0].name == "poetry"
        assert [c.args for c in fake_app._set_loading.call_args_list] == [(True,), (False,)]

    @pytest.mark.asyncio
    async def test_failure_notifies_and_keeps_data(self, fake_app, make_prompt):
        fake_app.store.set_prompts([make_prompt()])
        fake_app.services.taxonomy.fetch_tags.side_effect = ApiError("down")

        assert await library_actions.load_prompts(fake_app) is False

        assert len(fake_app.store.get_prompts()) == 1
        assert _messages(fake_app)[0].startswith("Could not load prompts.")
        fake_app._set_loading.assert_called_with(False)

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, fake_app, make_prompt):
        release_first = asyncio.Event()
        calls = 0

        async def fetch_prompts(**_kwargs):
            nonlocal calls
            calls += 1
            if calls == 1:
                await release_first.wait()
                return [make_prompt(id="old")]
            return [make_prompt(id="new")]

        fake_app.services.prompts.fetch_prompts = fetch_prompts

        first = asyncio.create_task(library_actions.load_prompts(fake_app))
        await asyncio.sleep(0)
        assert await library_actions.load_prompts(fake_app) is True
        release_first.set()

        assert await first is False
        assert [p.id for p in fake_app.store.get_prompts()] == ["new"]

    @pytest.mark.asyncio
    async def test_current_prompt_is_refreshed(self, fake_app, make_prompt):
        fake_app.store.set_current_prompt(make_prompt(id="1", title="Old"))
        fake_app.services.prompts.fetch_prompts.return_value = [make_prompt(id="1", title="New")]

        await library_actions.load_prompts(fake_app)

        assert fake_app.store.get_current_prompt().title == "New"

    @pytest.mark.asyncio
    async def test_current_prompt_cleared_when_gone(self, fake_app, make_prompt):
        fake_app.store.set_current_prompt(make_prompt(id="1"))

        await library_actions.load_prompts(fake_app)

        assert fake_app.store.get_current_prompt() is None


@pytest.mark.asyncio
async def test_refresh_taxonomy_failure_notifies(fake_app):
    fake_app.services.taxonomy.fetch_categories.side_effect = ApiError("down")

    assert await library_actions.refresh_taxonomy(fake_app) is False

    assert _messages(fake_app)[0].startswith("Could not load tags and categories.")


def test_action_refresh_schedules_load(fake_app):
    library_actions.action_refresh(fake_app)
    fake_app._track_task.assert_called_once()


# ============================================================================
# Filtering
# ============================================================================


class TestFilters:
    def test_apply_search_refreshes(self, fake_app):
        library_actions.apply_search(fake_app, "haiku")
        assert fake_app.pipeline.criteria.search_query == "haiku"
        fake_app._refresh_list.assert_called_once()

    def test_commit_search_marks_config_dirty(self, fake_app):
        library_actions.commit_search(fake_app, "haiku")
        assert fake_app.config.recent_searches == ["haiku"]
        assert fake_app._config_dirty is True

    def test_commit_blank_search_is_ignored(self, fake_app):
        library_actions.commit_search(fake_app, "  ")
        assert fake_app._config_dirty is False

    def test_category_and_tag_filters(self, fake_app):
        library_actions.set_category_filter(fake_app, "c1")
        library_actions.set_tag_filter(fake_app, "poetry")
        assert fake_app.pipeline.criteria.category_id == "c1"
        assert fake_app.pipeline.criteria.tag_name == "poetry"
        assert fake_app._refresh_list.call_count == 2

    def test_clear_filters_without_filters(self, fake_app):
        library_actions.action_clear_filters(fake_app)
        assert _messages(fake_app) == ["No filters to clear"]
        fake_app._refresh_list.assert_not_called()

    def test_clear_filters_keeps_search(self, fake_app):
        fake_app.pipeline.set_search_query("haiku")
        fake_app.pipeline.set_tag("poetry")

        library_actions.action_clear_filters(fake_app)

        assert fake_app.pipeline.criteria.search_query == "haiku"
        assert fake_app.pipeline.criteria.tag_name is None
        fake_app._get_filter_bar().reset.assert_called_once()
        assert _messages(fake_app) == ["Filters cleared"]

    def test_clear_all_filters_drops_search_too(self, fake_app):
        fake_app.pipeline.set_search_query("haiku")
        fake_app.pipeline.set_category("c1")

        library_actions.action_clear_all_filters(fake_app)

        assert fake_app.pipeline.criteria.is_empty
        fake_app._cancel_search_timer.assert_called_once()
        fake_app._get_filter_bar().reset.assert_called_once_with(search=True)
        fake_app._refresh_list.assert_called_once()
        assert _messages(fake_app) == ["Search and filters cleared"]

    def test_clear_all_filters_when_nothing_set(self, fake_app):
        library_actions.action_clear_all_filters(fake_app)

        assert _messages(fake_app) == ["No filters to clear"]
        fake_app._get_filter_bar().reset.assert_not_called()

    def test_load_more_when_everything_shown(self, fake_app):
        fake_app._last_page = PageResult(visible=[], has_more=False)
        library_actions.action_load_more(fake_app)
        assert _messages(fake_app) == ["All prompts are shown"]

    def test_load_more_advances_pipeline(self, fake_app, make_prompt):
        prompts = [make_prompt(str(i)) for i in range(5)]
        fake_app._last_page = fake_app.pipeline.compute(prompts, [], [])

        library_actions.action_load_more(fake_app)

        assert fake_app.pipeline.shown_count == 2
        fake_app._refresh_list.assert_called_once()


# ============================================================================
# Taxonomy
# ============================================================================


class TestTaxonomy:
    def test_open_panel_loads_current_taxonomy(self, fake_app, make_tag):
        fake_app.store.set_tags([make_tag()])

        library_actions.action_manage_taxonomy(fake_app)

        panel = fake_app._get_taxonomy_panel()
        panel.load.assert_called_once_with((), (make_tag(),))
        fake_app.modal_stack.open.assert_called_once_with(panel)

    @pytest.mark.asyncio
    async def test_add_tag_refreshes_taxonomy(self, fake_app, make_tag):
        tag = make_tag(id="t5", name="fun")
        fake_app.services.taxonomy.add_tag.return_value = tag
        fake_app.services.taxonomy.fetch_tags.return_value = [tag]

        assert await library_actions.add_taxonomy(fake_app, "Tag", "fun") is True

        fake_app.services.taxonomy.add_tag.assert_awaited_once_with(client=None, name="fun")
        fake_app._get_taxonomy_panel().show_status.assert_called_with('Tag "fun" created.')
        assert fake_app.store.get_tags() == [tag]

    @pytest.mark.asyncio
    async def test_add_category_failure_reports_in_panel(self, fake_app):
        fake_app.services.taxonomy.add_category.side_effect = ApiError("exists")

        assert await library_actions.add_taxonomy(fake_app, "Category", "Code") is False

        status_call = fake_app._get_taxonomy_panel().show_status.call_args
        assert status_call.args[0].startswith("Could not create the category.")
        assert status_call.kwargs == {"error": True}

    def test_open_panel_offers_pending_undo(self, fake_app, make_tag):
        fake_app._last_deleted_taxonomy = ("Tag", make_tag())

        library_actions.action_manage_taxonomy(fake_app)

        fake_app._get_taxonomy_panel().set_undo_available.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_rename_category_refreshes_taxonomy(self, fake_app, make_category):
        renamed = make_category(name="Prose")
        fake_app.services.taxonomy.fetch_categories.return_value = [renamed]

        result = await library_actions.rename_taxonomy(
            fake_app, "Category", make_category(), "Prose"
        )

        assert result is True
        fake_app.services.taxonomy.rename_category.assert_awaited_once_with(
            client=None, category_id="c1", name="Prose"
        )
        fake_app._get_taxonomy_panel().show_status.assert_called_with(
            'Category "Writing" renamed to "Prose".'
        )
        assert fake_app.store.get_categories() == [renamed]

    @pytest.mark.asyncio
    async def test_rename_failure_reports_in_panel(self, fake_app, make_tag):
        fake_app.services.taxonomy.rename_tag.side_effect = ApiError("taken")

        assert await library_actions.rename_taxonomy(fake_app, "Tag", make_tag(), "x") is False

        status_call = fake_app._get_taxonomy_panel().show_status.call_args
        assert status_call.args[0].startswith("Could not rename the tag.")
        assert status_call.kwargs == {"error": True}
        fake_app.services.taxonomy.fetch_tags.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_tag_remembers_it_for_undo(self, fake_app, make_tag):
        tag = make_tag()

        assert await library_actions.delete_taxonomy(fake_app, "Tag", tag) is True

        fake_app.confirm.assert_awaited_once()
        assert '"poetry"' in fake_app.confirm.await_args.args[0]
        fake_app.services.taxonomy.delete_tag.assert_awaited_once_with(client=None, tag_id="t1")
        assert fake_app._last_deleted_taxonomy == ("Tag", tag)
        panel = fake_app._get_taxonomy_panel()
        panel.set_undo_available.assert_called_once_with(True)
        assert panel.show_status.call_args.args[0].startswith('Tag "poetry" deleted.')
        fake_app.services.taxonomy.fetch_tags.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_cancelled_keeps_record(self, fake_app, make_category):
        fake_app.confirm.return_value = False

        assert await library_actions.delete_taxonomy(fake_app, "Category", make_category()) is False

        fake_app.services.taxonomy.delete_category.assert_not_awaited()
        assert fake_app._last_deleted_taxonomy is None
        fake_app._get_taxonomy_panel().show_status.assert_called_with(
            "Category deletion cancelled."
        )

    @pytest.mark.asyncio
    async def test_delete_without_id_is_rejected(self, fake_app, make_tag):
        assert await library_actions.delete_taxonomy(fake_app, "Tag", make_tag(id="")) is False

        fake_app.confirm.assert_not_awaited()
        fake_app.services.taxonomy.delete_tag.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_failure_leaves_nothing_to_undo(self, fake_app, make_category):
        fake_app.services.taxonomy.delete_category.side_effect = ApiError("in use")

        assert await library_actions.delete_taxonomy(fake_app, "Category", make_category()) is False

        assert fake_app._last_deleted_taxonomy is None
        fake_app._get_taxonomy_panel().set_undo_available.assert_not_called()

    @pytest.mark.asyncio
    async def test_undo_recreates_deleted_category(self, fake_app, make_category):
        restored = make_category(id="c9")
        fake_app._last_deleted_taxonomy = ("Category", make_category())
        fake_app.services.taxonomy.add_category.return_value = restored
        fake_app.services.taxonomy.fetch_categories.return_value = [restored]

        assert await library_actions.undo_taxonomy_delete(fake_app) is True

        fake_app.services.taxonomy.add_category.assert_awaited_once_with(
            client=None, name="Writing"
        )
        assert fake_app._last_deleted_taxonomy is None
        panel = fake_app._get_taxonomy_panel()
        panel.set_undo_available.assert_called_once_with(False)
        panel.show_status.assert_called_with('Category "Writing" restored.')
        assert fake_app.store.get_categories() == [restored]

    @pytest.mark.asyncio
    async def test_undo_failure_keeps_record(self, fake_app, make_tag):
        fake_app._last_deleted_taxonomy = ("Tag", make_tag())
        fake_app.services.taxonomy.add_tag.side_effect = ApiError("down")

        assert await library_actions.undo_taxonomy_delete(fake_app) is False

        assert fake_app._last_deleted_taxonomy == ("Tag", make_tag())

    @pytest.mark.asyncio
    async def test_undo_with_nothing_deleted(self, fake_app):
        assert await library_actions.undo_taxonomy_delete(fake_app) is False

        panel = fake_app._get_taxonomy_panel()
        panel.set_undo_available.assert_called_once_with(False)
        panel.show_status.assert_called_once_with("Nothing to undo.")
        fake_app.services.taxonomy.add_category.assert_not_awaited()
        fake_app.services.taxonomy.add_tag.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_kind_is_rejected(self, fake_app, make_tag):
        with pytest.raises(ValueError, match="Unknown taxonomy kind"):
            await library_actions.rename_taxonomy(fake_app, "Label", make_tag(), "x")


# ============================================================================
# Import
# ============================================================================


class TestImport:
    def test_open_resets_panel(self, fake_app):
        library_actions.action_batch_import(fake_app)
        panel = fake_app._get_import_panel()
        panel.reset.assert_called_once()
        fake_app.modal_stack.open.assert_called_once_with(panel)

    @pytest.mark.asyncio
    async def test_success_closes_and_reloads(self, fake_app):
        fake_app.services.prompts.import_prompts.return_value = ImportSummary(
            imported_count=2, skipped_count=1
        )

        assert await library_actions.import_batch(fake_app, [{"title": "a"}]) is True

        fake_app.modal_stack.close.assert_called_once_with(fake_app._get_import_panel())
        assert _messages(fake_app)[0] == "Imported 2 prompts.\n1 skipped by the server."
        assert fake_app.notify.call_args_list[0].kwargs["severity"] == "warning"
        fake_app.services.prompts.fetch_prompts.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_keeps_panel_open(self, fake_app):
        fake_app.services.prompts.import_prompts = AsyncMock(side_effect=ApiError("bad"))

        assert await library_actions.import_batch(fake_app, []) is False

        fake_app.modal_stack.close.assert_not_called()
        assert _messages(fake_app)[0].startswith("Could not import the prompts.")


# ============================================================================
# Theme
# ============================================================================


def test_cycle_theme_advances_and_marks_dirty(fake_app):
    library_actions.action_cycle_theme(fake_app)

    assert fake_app.config.theme_name == "catppuccin-mocha"
    assert fake_app.theme == "catppuccin-mocha"
    assert fake_app._config_dirty is True
    assert _messages(fake_app) == ["Theme: catppuccin-mocha"]


def test_cycle_theme_wraps(fake_app):
    fake_app.config.theme_name = "solarized-dark"
    library_actions.action_cycle_theme(fake_app)
    assert fake_app.config.theme_name == "monokai"
