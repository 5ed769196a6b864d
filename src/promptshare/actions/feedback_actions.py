"""Comment and result actions for the prompt view panel."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from promptshare.action_messages import build_actionable_error, describe_error
from promptshare.models import Comment, Result

if TYPE_CHECKING:
    from promptshare.app import PromptShareApp

logger = logging.getLogger(__name__)

FEEDBACK_KINDS = ("comment", "result")


def _showing(app: PromptShareApp, prompt_id: str) -> bool:
    prompt = app._get_view_panel().prompt
    return prompt is not None and prompt.id == prompt_id


async def load_feedback(app: PromptShareApp, prompt_id: str) -> bool:
    """Fetch comments and results for the prompt shown in the view panel.

    The response is dropped when the panel has moved on to another prompt.
    """
    client = app._http_client
    try:
        comments, results = await asyncio.gather(
            app.services.feedback.fetch_comments(client=client, prompt_id=prompt_id),
            app.services.feedback.fetch_results(client=client, prompt_id=prompt_id),
        )
    except Exception as exc:
        logger.warning("Loading feedback for %s failed: %s", prompt_id, exc, exc_info=True)
        if _showing(app, prompt_id):
            app._get_view_panel().show_feedback([], [])
            app.notify(
                build_actionable_error(
                    "load comments and results",
                    why=describe_error(exc),
                    next_step="reopen the prompt to retry",
                ),
                title="Feedback",
                severity="error",
            )
        return False
    if not _showing(app, prompt_id):
        logger.debug("Dropping feedback for %s; view panel moved on", prompt_id)
        return False
    app._get_view_panel().show_feedback(comments, results)
    return True


async def add_feedback(app: PromptShareApp, kind: str, prompt_id: str, content: str) -> bool:
    """Post a comment or result, then reload the panel's lists."""
    if kind not in FEEDBACK_KINDS:
        raise ValueError(f"Unknown feedback kind: {kind!r}")
    client = app._http_client
    author = app.config.author_name
    try:
        if kind == "comment":
            await app.services.feedback.add_comment(
                client=client, prompt_id=prompt_id, content=content, author=author
            )
        else:
            await app.services.feedback.add_result(
                client=client, prompt_id=prompt_id, content=content, author=author
            )
    except Exception as exc:
        logger.warning("Adding %s to %s failed: %s", kind, prompt_id, exc, exc_info=True)
        app.notify(
            build_actionable_error(
                f"add the {kind}", why=describe_error(exc), next_step="try again"
            ),
            title="Feedback",
            severity="error",
        )
        return False
    app.notify(f"{kind.capitalize()} added.", title="Feedback")
    await load_feedback(app, prompt_id)
    return True


async def delete_feedback(app: PromptShareApp, record: Comment | Result) -> bool:
    """Confirm and delete one comment or result."""
    kind = "comment" if isinstance(record, Comment) else "result"
    if not record.id:
        app.notify(f"{kind.capitalize()} ID missing for delete.", title="Feedback", severity="error")
        return False
    if not await app.confirm(f"Delete this {kind}? This action cannot be undone."):
        return False
    client = app._http_client
    try:
        if isinstance(record, Comment):
            await app.services.feedback.delete_comment(client=client, comment_id=record.id)
        else:
            await app.services.feedback.delete_result(client=client, result_id=record.id)
    except Exception as exc:
        logger.warning("Deleting %s %s failed: %s", kind, record.id, exc, exc_info=True)
        app.notify(f"Error deleting {kind}.", title="Feedback", severity="error")
        return False
    app.notify(f"{kind.capitalize()} deleted.", title="Feedback")
    if record.prompt_id:
        await load_feedback(app, record.prompt_id)
    else:
        view_prompt = app._get_view_panel().prompt
        if view_prompt is not None:
            await load_feedback(app, view_prompt.id)
    return True


__all__ = ["FEEDBACK_KINDS", "add_feedback", "delete_feedback", "load_feedback"]
