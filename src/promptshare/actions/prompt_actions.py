"""Prompt list actions: view, create, edit, delete, copy and undo."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from promptshare.action_messages import (
    NOTHING_TO_UNDO,
    PROMPT_COPIED,
    PROMPT_COPY_FAILED,
    PROMPT_DELETE_CANCELLED,
    PROMPT_DELETE_FAILED,
    PROMPT_DELETED,
    PROMPT_ID_MISSING,
    PROMPT_RESTORED,
    build_actionable_success,
    build_delete_prompt_confirmation,
    build_save_failure_message,
)
from promptshare.actions import feedback_actions
from promptshare.actions.library_actions import load_prompts
from promptshare.models import Prompt
from promptshare.query import display_title

if TYPE_CHECKING:
    from promptshare.app import PromptShareApp

logger = logging.getLogger(__name__)


def _target_prompt(app: PromptShareApp, prompt: Prompt | None) -> Prompt | None:
    """Explicit prompt, else the highlighted card; warns when there is neither."""
    target = prompt or app._get_highlighted_prompt()
    if target is None:
        app.notify("No prompt selected", title="Prompts", severity="warning")
    return target


def _delete_label(prompt: Prompt) -> str:
    title = prompt.title.strip()
    return title if title else (prompt.id or display_title(title))


# ============================================================================
# Panels
# ============================================================================


def action_view_prompt(app: PromptShareApp, prompt: Prompt | None = None) -> None:
    """Open the view panel for ``prompt`` and start loading its feedback."""
    target = _target_prompt(app, prompt)
    if target is None:
        return
    state = app.store.get_state()
    app.store.set_current_prompt(target)
    panel = app._get_view_panel()
    panel.show_prompt(target, state.categories, state.tags)
    app.modal_stack.open(panel)
    if target.id:
        app._track_task(feedback_actions.load_feedback(app, target.id))
    else:
        panel.show_feedback([], [])


def action_new_prompt(app: PromptShareApp) -> None:
    state = app.store.get_state()
    editor = app._get_editor_panel()
    editor.load(None, state.categories, state.tags, author_default=app.config.author_name)
    app.modal_stack.open(editor)


def action_edit_prompt(app: PromptShareApp, prompt: Prompt | None = None) -> None:
    """Open the editor on ``prompt`` (or the highlighted card)."""
    target = _target_prompt(app, prompt)
    if target is None:
        return
    state = app.store.get_state()
    editor = app._get_editor_panel()
    editor.load(target, state.categories, state.tags, author_default=app.config.author_name)
    app.modal_stack.open(editor)


# ============================================================================
# Backend mutations
# ============================================================================


async def save_prompt(app: PromptShareApp, prompt_id: str | None, data: dict[str, Any]) -> bool:
    """Create or update a prompt from editor data, then reload the list.

    On failure the editor stays open with the error in its status line.
    """
    editor = app._get_editor_panel()
    creating = prompt_id is None
    try:
        if creating:
            await app.services.prompts.create_prompt(client=app._http_client, data=data)
        else:
            await app.services.prompts.update_prompt(
                client=app._http_client, prompt_id=prompt_id, data=data
            )
    except Exception as exc:
        logger.warning("Saving prompt %s failed: %s", prompt_id or "<new>", exc, exc_info=True)
        message = build_save_failure_message(exc, creating=creating)
        editor.show_status(message)
        app.notify(message, title="Save", severity="error", timeout=8)
        return False
    app.modal_stack.close(editor)
    app.notify(
        build_actionable_success("Prompt created" if creating else "Prompt saved"),
        title="Save",
    )
    await load_prompts(app)
    return True


async def delete_prompt(app: PromptShareApp, prompt: Prompt | None = None) -> bool:
    """Confirm, delete, and refetch. Returns True when the prompt was deleted."""
    target = _target_prompt(app, prompt)
    if target is None:
        return False
    if not target.id:
        app.notify(PROMPT_ID_MISSING, title="Delete", severity="error")
        return False
    confirmed = await app.confirm(build_delete_prompt_confirmation(_delete_label(target)))
    if not confirmed:
        app.notify(PROMPT_DELETE_CANCELLED, title="Delete", severity="information")
        return False
    try:
        await app.services.prompts.delete_prompt(client=app._http_client, prompt_id=target.id)
    except Exception as exc:
        logger.warning("Deleting prompt %s failed: %s", target.id, exc, exc_info=True)
        app.notify(PROMPT_DELETE_FAILED, title="Delete", severity="error")
        return False

    app._last_deleted = target
    view = app._get_view_panel()
    if view.prompt is not None and view.prompt.id == target.id:
        app.modal_stack.close(view)
    current = app.store.get_current_prompt()
    if current is not None and current.id == target.id:
        app.store.set_current_prompt(None)
    app.notify(PROMPT_DELETED, title="Delete")
    await load_prompts(app)
    return True


async def undo_delete(app: PromptShareApp) -> bool:
    """Re-create the most recently deleted prompt."""
    prompt = app._last_deleted
    if prompt is None:
        app.notify(NOTHING_TO_UNDO, title="Undo")
        return False
    try:
        await app.services.prompts.create_prompt(
            client=app._http_client, data=prompt.to_payload()
        )
    except Exception as exc:
        logger.warning("Restoring prompt %s failed: %s", prompt.id, exc, exc_info=True)
        app.notify(
            build_save_failure_message(exc, creating=True), title="Undo", severity="error"
        )
        return False
    app._last_deleted = None
    app.notify(PROMPT_RESTORED, title="Undo")
    await load_prompts(app)
    return True


# ============================================================================
# Clipboard
# ============================================================================


def action_copy_prompt(app: PromptShareApp, prompt: Prompt | None = None) -> bool:
    """Copy the prompt content to the system clipboard."""
    target = _target_prompt(app, prompt)
    if target is None:
        return False
    try:
        copied = app._copy_to_clipboard(target.content)
    except Exception as exc:
        logger.warning("Clipboard copy raised: %s", exc, exc_info=True)
        copied = False
    if copied:
        app.notify(PROMPT_COPIED, title="Copy")
    else:
        app.notify(PROMPT_COPY_FAILED, title="Copy", severity="error")
    return copied


__all__ = [
    "action_copy_prompt",
    "action_edit_prompt",
    "action_new_prompt",
    "action_view_prompt",
    "delete_prompt",
    "save_prompt",
    "undo_delete",
]
