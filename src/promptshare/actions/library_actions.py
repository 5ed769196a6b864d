"""Library actions: loading, filtering, taxonomy, batch import and themes."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from promptshare.action_messages import (
    NOTHING_TO_UNDO,
    build_actionable_error,
    build_delete_taxonomy_confirmation,
    build_import_summary_message,
    build_load_failure_message,
    build_taxonomy_created_message,
    build_taxonomy_deleted_message,
    build_taxonomy_renamed_message,
    build_taxonomy_restored_message,
    describe_error,
)
from promptshare.config import remember_search
from promptshare.models import TAXONOMY_KINDS, Category, Tag
from promptshare.themes import THEME_NAMES, apply_theme_colors

if TYPE_CHECKING:
    from promptshare.app import PromptShareApp

logger = logging.getLogger(__name__)


# ============================================================================
# Loading
# ============================================================================


async def load_prompts(app: PromptShareApp) -> bool:
    """Fetch prompts, categories and tags and publish them to the store.

    Each call takes a new generation number; a response that arrives after a
    newer load has started is dropped so it cannot overwrite fresher data.
    """
    app._load_generation += 1
    generation = app._load_generation
    app._set_loading(True)
    client = app._http_client
    try:
        prompts, categories, tags = await asyncio.gather(
            app.services.prompts.fetch_prompts(client=client),
            app.services.taxonomy.fetch_categories(client=client),
            app.services.taxonomy.fetch_tags(client=client),
        )
    except Exception as exc:
        logger.warning("Loading prompts failed: %s", exc, exc_info=True)
        if generation == app._load_generation:
            app._set_loading(False)
            app.notify(build_load_failure_message(exc), title="Load", severity="error", timeout=8)
        return False
    if generation != app._load_generation:
        logger.debug(
            "Discarding stale prompt load %d (latest is %d)", generation, app._load_generation
        )
        return False

    fields: dict[str, Any] = {"prompts": prompts, "categories": categories, "tags": tags}
    current = app.store.get_current_prompt()
    if current is not None:
        fields["current_prompt"] = next((p for p in prompts if p.id == current.id), None)
    app.store.update(**fields)
    app._set_loading(False)
    logger.debug("Loaded %d prompts (generation %d)", len(prompts), generation)
    return True


async def refresh_taxonomy(app: PromptShareApp) -> bool:
    """Re-fetch categories and tags only."""
    client = app._http_client
    try:
        categories, tags = await asyncio.gather(
            app.services.taxonomy.fetch_categories(client=client),
            app.services.taxonomy.fetch_tags(client=client),
        )
    except Exception as exc:
        logger.warning("Loading tags and categories failed: %s", exc, exc_info=True)
        app.notify(
            build_actionable_error(
                "load tags and categories",
                why=describe_error(exc),
                next_step="press r to retry",
            ),
            title="Tags & Categories",
            severity="error",
        )
        return False
    app.store.update(categories=categories, tags=tags)
    return True


def action_refresh(app: PromptShareApp) -> None:
    app.notify("Reloading prompts...", title="Load", timeout=2)
    app._track_task(load_prompts(app))


# ============================================================================
# Filtering
# ============================================================================


def apply_search(app: PromptShareApp, query: str) -> None:
    app.pipeline.set_search_query(query)
    app._refresh_list()


def commit_search(app: PromptShareApp, query: str) -> None:
    """Record a submitted search in the recent-search history."""
    before = list(app.config.recent_searches)
    remember_search(app.config, query)
    if app.config.recent_searches != before:
        app._config_dirty = True


def set_category_filter(app: PromptShareApp, category_id: str | None) -> None:
    app.pipeline.set_category(category_id)
    app._refresh_list()


def set_tag_filter(app: PromptShareApp, tag_value: str | None) -> None:
    app.pipeline.set_tag(tag_value)
    app._refresh_list()


def action_clear_filters(app: PromptShareApp) -> None:
    """Reset category and tag filters; the search text is kept."""
    criteria = app.pipeline.criteria
    if criteria.category_id is None and criteria.tag_name is None:
        app.notify("No filters to clear", title="Filters")
        return
    app.pipeline.clear_filters()
    app._get_filter_bar().reset()
    app._refresh_list()
    app.notify("Filters cleared", title="Filters")


def action_clear_all_filters(app: PromptShareApp) -> None:
    """Reset the search text and both filters."""
    if app.pipeline.criteria.is_empty:
        app.notify("No filters to clear", title="Filters")
        return
    app._cancel_search_timer()
    app.pipeline.clear_all()
    app._get_filter_bar().reset(search=True)
    app._refresh_list()
    app.notify("Search and filters cleared", title="Filters")


def action_load_more(app: PromptShareApp) -> None:
    """Reveal the next page of the filtered list."""
    page = app._last_page
    if page is None or not page.has_more:
        app.notify("All prompts are shown", title="Load More")
        return
    app.pipeline.load_more()
    app._refresh_list()


# ============================================================================
# Tags & categories
# ============================================================================


def action_manage_taxonomy(app: PromptShareApp) -> None:
    state = app.store.get_state()
    panel = app._get_taxonomy_panel()
    panel.load(state.categories, state.tags)
    panel.show_status("")
    panel.set_undo_available(app._last_deleted_taxonomy is not None)
    app.modal_stack.open(panel)


def _check_kind(kind: str) -> None:
    if kind not in TAXONOMY_KINDS:
        raise ValueError(f"Unknown taxonomy kind: {kind!r}")


async def add_taxonomy(app: PromptShareApp, kind: str, name: str) -> bool:
    """Create a category or tag and refresh the taxonomy lists."""
    _check_kind(kind)
    panel = app._get_taxonomy_panel()
    client = app._http_client
    try:
        if kind == "Category":
            record = await app.services.taxonomy.add_category(client=client, name=name)
        else:
            record = await app.services.taxonomy.add_tag(client=client, name=name)
    except Exception as exc:
        logger.warning("Creating %s %r failed: %s", kind.lower(), name, exc, exc_info=True)
        panel.show_status(
            build_actionable_error(
                f"create the {kind.lower()}",
                why=describe_error(exc),
                next_step="check the name and try again",
            ),
            error=True,
        )
        return False
    message = build_taxonomy_created_message(kind, record.name or name)
    panel.show_status(message)
    app.notify(message, title="Tags & Categories")
    await refresh_taxonomy(app)
    return True


async def rename_taxonomy(
    app: PromptShareApp, kind: str, record: Category | Tag, name: str
) -> bool:
    """Rename a category or tag; prompts keep referencing it by id."""
    _check_kind(kind)
    panel = app._get_taxonomy_panel()
    client = app._http_client
    try:
        if kind == "Category":
            await app.services.taxonomy.rename_category(
                client=client, category_id=record.id, name=name
            )
        else:
            await app.services.taxonomy.rename_tag(client=client, tag_id=record.id, name=name)
    except Exception as exc:
        logger.warning("Renaming %s %s failed: %s", kind.lower(), record.id, exc, exc_info=True)
        panel.show_status(
            build_actionable_error(
                f"rename the {kind.lower()}",
                why=describe_error(exc),
                next_step="check the name and try again",
            ),
            error=True,
        )
        return False
    message = build_taxonomy_renamed_message(kind, record.name, name)
    panel.show_status(message)
    app.notify(message, title="Tags & Categories")
    await refresh_taxonomy(app)
    return True


async def delete_taxonomy(app: PromptShareApp, kind: str, record: Category | Tag) -> bool:
    """Confirm and delete a category or tag, remembering it for undo.

    Prompts that reference the deleted id keep it and render it as deleted.
    """
    _check_kind(kind)
    panel = app._get_taxonomy_panel()
    if not record.id:
        panel.show_status(f"{kind} ID missing for delete.", error=True)
        return False
    confirmed = await app.confirm(build_delete_taxonomy_confirmation(kind, record.name))
    if not confirmed:
        panel.show_status(f"{kind} deletion cancelled.")
        return False
    client = app._http_client
    try:
        if kind == "Category":
            await app.services.taxonomy.delete_category(client=client, category_id=record.id)
        else:
            await app.services.taxonomy.delete_tag(client=client, tag_id=record.id)
    except Exception as exc:
        logger.warning("Deleting %s %s failed: %s", kind.lower(), record.id, exc, exc_info=True)
        panel.show_status(
            build_actionable_error(
                f"delete the {kind.lower()}",
                why=describe_error(exc),
                next_step="press r to refresh and try again",
            ),
            error=True,
        )
        return False
    app._last_deleted_taxonomy = (kind, record)
    panel.set_undo_available(True)
    message = build_taxonomy_deleted_message(kind, record.name)
    panel.show_status(message)
    app.notify(message, title="Tags & Categories")
    await refresh_taxonomy(app)
    return True


async def undo_taxonomy_delete(app: PromptShareApp) -> bool:
    """Re-create the last deleted category or tag under its old name.

    The server assigns a new id, so prompts that used the old one stay
    marked as deleted until they are edited.
    """
    panel = app._get_taxonomy_panel()
    if app._last_deleted_taxonomy is None:
        panel.set_undo_available(False)
        panel.show_status(NOTHING_TO_UNDO)
        return False
    kind, record = app._last_deleted_taxonomy
    client = app._http_client
    try:
        if kind == "Category":
            await app.services.taxonomy.add_category(client=client, name=record.name)
        else:
            await app.services.taxonomy.add_tag(client=client, name=record.name)
    except Exception as exc:
        logger.warning("Restoring %s %r failed: %s", kind.lower(), record.name, exc, exc_info=True)
        panel.show_status(
            build_actionable_error(
                f"restore the {kind.lower()}",
                why=describe_error(exc),
                next_step="add it again by name",
            ),
            error=True,
        )
        return False
    app._last_deleted_taxonomy = None
    panel.set_undo_available(False)
    message = build_taxonomy_restored_message(kind, record.name)
    panel.show_status(message)
    app.notify(message, title="Tags & Categories")
    await refresh_taxonomy(app)
    return True


# ============================================================================
# Batch import
# ============================================================================


def action_batch_import(app: PromptShareApp) -> None:
    panel = app._get_import_panel()
    panel.reset()
    app.modal_stack.open(panel)


async def import_batch(app: PromptShareApp, prompts: list[dict[str, Any]]) -> bool:
    """Send validated prompts to the import endpoint, then reload."""
    try:
        summary = await app.services.prompts.import_prompts(
            client=app._http_client, prompts=prompts
        )
    except Exception as exc:
        logger.warning("Batch import of %d prompts failed: %s", len(prompts), exc, exc_info=True)
        app.notify(
            build_actionable_error(
                "import the prompts",
                why=describe_error(exc),
                next_step="fix the batch and press Import again",
            ),
            title="Import",
            severity="error",
            timeout=8,
        )
        return False
    for error in summary.errors:
        logger.info("Import reported: %s", error)
    app.modal_stack.close(app._get_import_panel())
    app.notify(
        build_import_summary_message(summary.imported_count, summary.skipped_count),
        title="Import",
        severity="warning" if summary.skipped_count else "information",
    )
    await load_prompts(app)
    return True


# ============================================================================
# Theme
# ============================================================================


def action_cycle_theme(app: PromptShareApp) -> None:
    current = app.config.theme_name
    index = THEME_NAMES.index(current) if current in THEME_NAMES else -1
    name = apply_theme_colors(THEME_NAMES[(index + 1) % len(THEME_NAMES)])
    app.config.theme_name = name
    app._config_dirty = True
    app.theme = name
    app._refresh_list()
    app.notify(f"Theme: {name}", title="Theme", timeout=2)


__all__ = [
    "action_batch_import",
    "action_clear_all_filters",
    "action_clear_filters",
    "action_cycle_theme",
    "action_load_more",
    "action_manage_taxonomy",
    "action_refresh",
    "add_taxonomy",
    "apply_search",
    "commit_search",
    "import_batch",
    "delete_taxonomy",
    "load_prompts",
    "refresh_taxonomy",
    "rename_taxonomy",
    "set_category_filter",
    "set_tag_filter",
    "undo_taxonomy_delete",
]
