"""PromptShare TUI - browse, edit and share prompts stored on a PromptShare server.

Key bindings:
    /       - Focus search
    v/Enter - View prompt (comments and results)
    n       - New prompt
    e       - Edit prompt
    d       - Delete prompt
    u       - Undo last delete
    c       - Copy prompt content
    m       - Load more prompts
    x       - Clear category and tag filters
    X       - Clear search and all filters
    t       - Manage tags and categories
    i       - Batch import
    r       - Reload from server
    j/k     - Navigate down/up (vim-style)
    Ctrl+t  - Cycle color theme
    ?       - Help
    Esc     - Close the top dialog / clear search
    q       - Quit

Dialogs are panels layered over the list by a ModalStackManager: only the
topmost one is interactive, Tab cycles inside it, and closing it returns
focus to wherever it was before the panel opened.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

import httpx
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import Header, Input, Label, OptionList, Select
from textual.widgets.option_list import Option

from promptshare.cli import main as _cli_main
from promptshare.clipboard import copy_text
from promptshare.config import load_config, save_config
from promptshare.modal_stack import ModalStackManager
from promptshare.modals import (
    BatchImportPanel,
    ConfirmModal,
    HelpScreen,
    ModalPanel,
    PromptEditorPanel,
    PromptViewPanel,
    TaxonomyPanel,
)
from promptshare.models import AppState, Category, Prompt, Tag, UserConfig
from promptshare.query import (
    FilterPipeline,
    PageResult,
    build_empty_message,
    build_filter_summary,
    build_highlight_terms,
)
from promptshare.services.interfaces import AppServices, build_default_app_services
from promptshare.services.prompt_api_service import USER_AGENT
from promptshare.state import AppStateStore
from promptshare.themes import TEXTUAL_THEMES, apply_theme_colors
from promptshare.ui_constants import APP_BINDINGS, APP_CSS, LIST_ACTIONS, SEARCH_DEBOUNCE_DELAY
from promptshare.widgets import (
    LIST_FOOTER_BINDINGS,
    LOAD_MORE_OPTION_ID,
    MODAL_FOOTER_BINDINGS,
    ContextFooter,
    FilterBar,
    StatusBar,
    build_prompt_options,
)

logger = logging.getLogger(__name__)


class PromptShareApp(App):
    """A TUI client for a PromptShare prompt library."""

    TITLE = "PromptShare"

    CSS = APP_CSS
    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        services: AppServices | None = None,
        store: AppStateStore | None = None,
        *,
        load_on_mount: bool = True,
        persist: bool = True,
    ) -> None:
        super().__init__()
        # Register all Textual themes so $th-* CSS variables resolve before compose()
        for textual_theme in TEXTUAL_THEMES.values():
            self.register_theme(textual_theme)
        self.config = config or UserConfig()
        self.config.theme_name = apply_theme_colors(self.config.theme_name)
        self.theme = self.config.theme_name

        self.services: AppServices = services or build_default_app_services(self.config)
        self.store = store or AppStateStore()
        self.modal_stack = ModalStackManager(self)
        self.pipeline = FilterPipeline(
            self.config.page_size, tag_match=self.config.tag_match_mode
        )

        self._load_on_mount = load_on_mount
        self._persist = persist
        self._config_dirty = False
        self._http_client: httpx.AsyncClient | None = None

        # Reload bookkeeping: stale responses carry an older generation
        self._load_generation = 0
        self._loading = False

        self._last_deleted: Prompt | None = None
        self._last_deleted_taxonomy: tuple[str, Category | Tag] | None = None
        self._last_page: PageResult | None = None
        # Option index -> prompt for the rendered page
        self._visible_prompts: list[Prompt] = []

        self._search_timer: Timer | None = None
        self._pending_query = ""

        # Background task tracking (prevent GC of fire-and-forget tasks)
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._unsubscribe_store: Any = None
        self._remove_stack_listener: Any = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            yield FilterBar(self.config.recent_searches, id="filter-bar")
            with Vertical(id="list-pane"):
                yield Label(" Prompts", id="list-header")
                yield OptionList(id="prompt-list")
            yield StatusBar(id="status-bar")
        yield PromptViewPanel()
        yield PromptEditorPanel()
        yield TaxonomyPanel()
        yield BatchImportPanel()
        yield ContextFooter()

    def on_mount(self) -> None:
        self.sub_title = self.config.base_url
        self._http_client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT})

        if self.config.config_defaulted:
            self.notify(
                "Config file was invalid. Using defaults.",
                severity="warning",
                timeout=8,
            )

        self._remove_stack_listener = self.modal_stack.add_listener(self._on_modal_stack_changed)
        # Replays the current state immediately, which renders the first page
        self._unsubscribe_store = self.store.subscribe(self._on_state_changed)
        self._get_footer().render_bindings(LIST_FOOTER_BINDINGS)
        self._get_prompt_list().focus()

        if self._load_on_mount:
            from promptshare.actions import library_actions as _actions

            self._track_task(_actions.load_prompts(self))

    async def on_unmount(self) -> None:
        """Stop timers and tasks, close the HTTP client, and save preferences."""
        timer = self._search_timer
        self._search_timer = None
        if timer is not None:
            timer.stop()

        if self._unsubscribe_store is not None:
            self._unsubscribe_store()
            self._unsubscribe_store = None
        if self._remove_stack_listener is not None:
            self._remove_stack_listener()
            self._remove_stack_listener = None

        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

        if self._persist and self._config_dirty:
            self._save_preferences()

    def _save_preferences(self) -> None:
        """Persist theme and recent searches without the session's CLI overrides."""
        stored = load_config()
        stored.theme_name = self.config.theme_name
        stored.recent_searches = list(self.config.recent_searches)
        if save_config(stored):
            self._config_dirty = False

    # ========================================================================
    # Background tasks
    # ========================================================================

    def _track_task(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[Any]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question; resolves False when dismissed."""
        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

        def _on_result(result: bool | None) -> None:
            if not future.done():
                future.set_result(bool(result))

        self.push_screen(ConfirmModal(message), _on_result)
        return await future

    def _copy_to_clipboard(self, text: str) -> bool:
        """Copy via the platform clipboard tool, else the terminal (OSC 52)."""
        if copy_text(text):
            return True
        self.copy_to_clipboard(text)
        return True

    # ========================================================================
    # Widget lookups
    # ========================================================================

    def _get_prompt_list(self) -> OptionList:
        return self.query_one("#prompt-list", OptionList)

    def _get_filter_bar(self) -> FilterBar:
        return self.query_one(FilterBar)

    def _get_status_bar(self) -> StatusBar:
        return self.query_one(StatusBar)

    def _get_footer(self) -> ContextFooter:
        return self.query_one(ContextFooter)

    def _get_view_panel(self) -> PromptViewPanel:
        return self.query_one(PromptViewPanel)

    def _get_editor_panel(self) -> PromptEditorPanel:
        return self.query_one(PromptEditorPanel)

    def _get_taxonomy_panel(self) -> TaxonomyPanel:
        return self.query_one(TaxonomyPanel)

    def _get_import_panel(self) -> BatchImportPanel:
        return self.query_one(BatchImportPanel)

    def _get_highlighted_prompt(self) -> Prompt | None:
        """Get the currently highlighted prompt."""
        try:
            option_list = self._get_prompt_list()
        except NoMatches:
            return None
        idx = option_list.highlighted
        if idx is not None and 0 <= idx < len(self._visible_prompts):
            return self._visible_prompts[idx]
        return None

    # ========================================================================
    # Rendering
    # ========================================================================

    def _on_state_changed(self, state: AppState) -> None:
        """Store listener: refresh selectors, the list, and any open panels."""
        self._get_filter_bar().set_taxonomy(
            state.categories, state.tags, tag_match=self.pipeline.tag_match
        )
        self._refresh_list(state)

        view = self._get_view_panel()
        if self.modal_stack.is_open(view) and state.current_prompt is not None:
            view.show_prompt(state.current_prompt, state.categories, state.tags)
        editor = self._get_editor_panel()
        if self.modal_stack.is_open(editor):
            editor.refresh_taxonomy(state.categories, state.tags)
        taxonomy = self._get_taxonomy_panel()
        if self.modal_stack.is_open(taxonomy):
            taxonomy.load(state.categories, state.tags)

    def _refresh_list(self, state: AppState | None = None) -> PageResult:
        """Re-run the filter pipeline and rebuild the prompt list."""
        state = state or self.store.get_state()
        page = self.pipeline.compute(state.prompts, state.categories, state.tags)
        self._last_page = page
        self._visible_prompts = list(page.visible)

        option_list = self._get_prompt_list()
        previous = option_list.highlighted
        option_list.clear_options()
        if page.visible:
            option_list.add_options(
                build_prompt_options(
                    page.visible,
                    state.categories,
                    state.tags,
                    remaining=page.total - len(page.visible),
                    highlight_terms=build_highlight_terms(self.pipeline.criteria),
                )
            )
            if previous is None or previous >= option_list.option_count:
                option_list.highlighted = 0
            else:
                option_list.highlighted = previous
        else:
            option_list.add_option(
                Option(build_empty_message(self.pipeline.criteria, state.categories), disabled=True)
            )
        self._refresh_status(state, page)
        return page

    def _refresh_status(self, state: AppState | None = None, page: PageResult | None = None) -> None:
        state = state or self.store.get_state()
        page = page or self._last_page
        visible = len(page.visible) if page is not None else 0
        total = page.total if page is not None else 0
        self._get_status_bar().show(
            build_filter_summary(self.pipeline.criteria, state.categories),
            visible,
            total,
            loading=self._loading,
        )

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        try:
            self._refresh_status()
        except NoMatches:
            pass  # Widget tree torn down during shutdown

    def _on_modal_stack_changed(self, stack: ModalStackManager) -> None:
        """Disable the list while any panel is open and swap footer hints."""
        self.query_one("#main-container").disabled = stack.modal_open
        self._get_footer().render_bindings(
            MODAL_FOOTER_BINDINGS if stack.modal_open else LIST_FOOTER_BINDINGS
        )
        view = self._get_view_panel()
        if not stack.is_open(view) and self.store.get_current_prompt() is not None:
            self.store.set_current_prompt(None)

    # ========================================================================
    # Focus and key routing
    # ========================================================================

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action in LIST_ACTIONS and self.modal_stack.modal_open:
            return False
        return True

    def action_focus_next(self) -> None:
        if not isinstance(self.screen, ModalScreen) and self.modal_stack.trap_focus(True):
            return
        super().action_focus_next()

    def action_focus_previous(self) -> None:
        if not isinstance(self.screen, ModalScreen) and self.modal_stack.trap_focus(False):
            return
        super().action_focus_previous()

    def action_escape(self) -> None:
        """Close the top panel, else clear the search box."""
        if self.modal_stack.handle_escape():
            return
        search_input = self.query_one("#search-input", Input)
        if search_input.value:
            self._cancel_search_timer()
            search_input.value = ""
            self._apply_search("")
        self._get_prompt_list().focus()

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_cursor_down(self) -> None:
        """Move cursor down (vim-style j key)."""
        self._get_prompt_list().action_cursor_down()

    def action_cursor_up(self) -> None:
        """Move cursor up (vim-style k key)."""
        self._get_prompt_list().action_cursor_up()

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    # ========================================================================
    # Search and filters
    # ========================================================================

    def _cancel_search_timer(self) -> None:
        timer = self._search_timer
        self._search_timer = None
        if timer is not None:
            timer.stop()

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        """Debounce search input before re-filtering."""
        self._pending_query = event.value
        # Atomic swap pattern: capture and clear before stopping
        self._cancel_search_timer()
        self._search_timer = self.set_timer(SEARCH_DEBOUNCE_DELAY, self._debounced_search)

    def _debounced_search(self) -> None:
        self._search_timer = None
        self._apply_search(self._pending_query)

    def _apply_search(self, query: str) -> None:
        from promptshare.actions import library_actions as _actions

        _actions.apply_search(self, query)

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        from promptshare.actions import library_actions as _actions

        self._cancel_search_timer()
        _actions.apply_search(self, event.value)
        _actions.commit_search(self, event.value)
        self._get_prompt_list().focus()

    @on(Select.Changed, "#category-filter")
    def on_category_changed(self, event: Select.Changed) -> None:
        from promptshare.actions import library_actions as _actions

        value = event.value if isinstance(event.value, str) else None
        _actions.set_category_filter(self, value)

    @on(Select.Changed, "#tag-filter")
    def on_tag_changed(self, event: Select.Changed) -> None:
        from promptshare.actions import library_actions as _actions

        value = event.value if isinstance(event.value, str) else None
        _actions.set_tag_filter(self, value)

    @on(OptionList.OptionSelected, "#prompt-list")
    def on_prompt_selected(self, event: OptionList.OptionSelected) -> None:
        """Enter on a card views it; on the trailing row it loads more."""
        if event.option.id == LOAD_MORE_OPTION_ID:
            self.action_load_more()
            return
        idx = event.option_index
        if 0 <= idx < len(self._visible_prompts):
            self.action_view_prompt(self._visible_prompts[idx])

    def action_clear_filters(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_clear_filters(self)

    def action_clear_all_filters(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_clear_all_filters(self)

    def action_load_more(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_load_more(self)

    def action_refresh(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_refresh(self)

    def action_cycle_theme(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_cycle_theme(self)

    # ========================================================================
    # Prompt actions
    # ========================================================================

    def action_view_prompt(self, prompt: Prompt | None = None) -> None:
        from promptshare.actions import prompt_actions as _actions

        return _actions.action_view_prompt(self, prompt)

    def action_new_prompt(self) -> None:
        from promptshare.actions import prompt_actions as _actions

        return _actions.action_new_prompt(self)

    def action_edit_prompt(self, prompt: Prompt | None = None) -> None:
        from promptshare.actions import prompt_actions as _actions

        return _actions.action_edit_prompt(self, prompt)

    def action_delete_prompt(self, prompt: Prompt | None = None) -> None:
        from promptshare.actions import prompt_actions as _actions

        self._track_task(_actions.delete_prompt(self, prompt))

    def action_copy_prompt(self, prompt: Prompt | None = None) -> None:
        from promptshare.actions import prompt_actions as _actions

        _actions.action_copy_prompt(self, prompt)

    def action_undo_delete(self) -> None:
        from promptshare.actions import prompt_actions as _actions

        self._track_task(_actions.undo_delete(self))

    def action_manage_taxonomy(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_manage_taxonomy(self)

    def action_batch_import(self) -> None:
        from promptshare.actions import library_actions as _actions

        return _actions.action_batch_import(self)

    # ========================================================================
    # Panel messages
    # ========================================================================

    @on(ModalPanel.CloseRequested)
    def on_panel_close_requested(self, event: ModalPanel.CloseRequested) -> None:
        self.modal_stack.close(event.panel)

    @on(PromptViewPanel.ActionRequested)
    def on_view_action(self, event: PromptViewPanel.ActionRequested) -> None:
        if event.action == "edit":
            self.action_edit_prompt(event.prompt)
        elif event.action == "delete":
            self.action_delete_prompt(event.prompt)
        elif event.action == "copy":
            self.action_copy_prompt(event.prompt)
        else:
            logger.warning("Unknown view panel action %r", event.action)

    @on(PromptViewPanel.FeedbackAddRequested)
    def on_feedback_add(self, event: PromptViewPanel.FeedbackAddRequested) -> None:
        from promptshare.actions import feedback_actions as _actions

        self._track_task(_actions.add_feedback(self, event.kind, event.prompt_id, event.content))

    @on(PromptViewPanel.FeedbackDeleteRequested)
    def on_feedback_delete(self, event: PromptViewPanel.FeedbackDeleteRequested) -> None:
        from promptshare.actions import feedback_actions as _actions

        self._track_task(_actions.delete_feedback(self, event.record))

    @on(PromptEditorPanel.SaveRequested)
    def on_editor_save(self, event: PromptEditorPanel.SaveRequested) -> None:
        from promptshare.actions import prompt_actions as _actions

        self._track_task(_actions.save_prompt(self, event.prompt_id, event.data))

    @on(PromptEditorPanel.ManageTaxonomyRequested)
    def on_editor_manage_taxonomy(self) -> None:
        from promptshare.actions import library_actions as _actions

        _actions.action_manage_taxonomy(self)

    @on(TaxonomyPanel.AddRequested)
    def on_taxonomy_add(self, event: TaxonomyPanel.AddRequested) -> None:
        from promptshare.actions import library_actions as _actions

        self._track_task(_actions.add_taxonomy(self, event.kind, event.name))

    @on(TaxonomyPanel.RenameRequested)
    def on_taxonomy_rename(self, event: TaxonomyPanel.RenameRequested) -> None:
        from promptshare.actions import library_actions as _actions

        self._track_task(_actions.rename_taxonomy(self, event.kind, event.record, event.name))

    @on(TaxonomyPanel.DeleteRequested)
    def on_taxonomy_delete(self, event: TaxonomyPanel.DeleteRequested) -> None:
        from promptshare.actions import library_actions as _actions

        self._track_task(_actions.delete_taxonomy(self, event.kind, event.record))

    @on(TaxonomyPanel.UndoRequested)
    def on_taxonomy_undo(self) -> None:
        from promptshare.actions import library_actions as _actions

        self._track_task(_actions.undo_taxonomy_delete(self))

    @on(BatchImportPanel.ImportRequested)
    def on_import_requested(self, event: BatchImportPanel.ImportRequested) -> None:
        from promptshare.actions import library_actions as _actions

        self._track_task(_actions.import_batch(self, event.prompts))


def main() -> int:
    """Main entry point wrapper for CLI/bootstrap logic."""
    return _cli_main(app_factory=PromptShareApp)


__all__ = ["PromptShareApp", "main"]
