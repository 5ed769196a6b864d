"""UI-facing copy builders for action confirmations and notifications."""

from __future__ import annotations

import httpx

# Toast copy for the prompt list actions
PROMPT_DELETED = "Prompt deleted."
PROMPT_DELETE_CANCELLED = "Prompt deletion cancelled."
PROMPT_DELETE_FAILED = "Error deleting prompt."
PROMPT_ID_MISSING = "Prompt ID missing for delete."
PROMPT_COPIED = "Prompt copied to clipboard."
PROMPT_COPY_FAILED = "Failed to copy prompt."
PROMPT_RESTORED = "Prompt restored."
NOTHING_TO_UNDO = "Nothing to undo."


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_success(
    message: str,
    *,
    detail: str | None = None,
    next_step: str | None = None,
) -> str:
    """Build a concise success message with optional detail and next step."""
    lines = [_ensure_sentence(message)]
    if detail:
        lines.append(_ensure_sentence(detail))
    if next_step:
        lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def describe_error(exc: BaseException) -> str:
    """Short, user-safe reason for a failed backend call."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"the server answered {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "the server did not respond in time"
    if isinstance(exc, httpx.RequestError):
        return "the server could not be reached"
    message = str(exc).strip()
    return message or type(exc).__name__


def build_delete_prompt_confirmation(label: str) -> str:
    """Build the confirmation prompt for deleting one prompt."""
    return f'Are you sure you want to delete the prompt "{label}"? This action cannot be undone.'


def build_load_failure_message(exc: BaseException) -> str:
    return build_actionable_error(
        "load prompts",
        why=describe_error(exc),
        next_step="check the backend URL (--base-url) and press r to retry",
    )


def build_save_failure_message(exc: BaseException, *, creating: bool) -> str:
    return build_actionable_error(
        "create the prompt" if creating else "save the prompt",
        why=describe_error(exc),
        next_step="keep the editor open and try again",
    )


def build_import_summary_message(imported: int, skipped: int) -> str:
    """Build the notification shown after a batch import."""
    noun = "prompt" if imported == 1 else "prompts"
    if skipped:
        return build_actionable_success(
            f"Imported {imported} {noun}",
            detail=f"{skipped} skipped by the server",
        )
    return build_actionable_success(f"Imported {imported} {noun}")


def build_taxonomy_created_message(kind: str, name: str) -> str:
    return f'{kind} "{name}" created.'


def build_taxonomy_renamed_message(kind: str, old_name: str, new_name: str) -> str:
    return f'{kind} "{old_name}" renamed to "{new_name}".'


def build_delete_taxonomy_confirmation(kind: str, name: str) -> str:
    """Build the confirmation prompt for deleting a tag or category."""
    return (
        f'Delete the {kind.lower()} "{name}"? Prompts that use it will show '
        f'"Deleted {kind}" until they are edited.'
    )


def build_taxonomy_deleted_message(kind: str, name: str) -> str:
    return build_actionable_success(
        f'{kind} "{name}" deleted', next_step="press Undo in this dialog to restore it"
    )


def build_taxonomy_restored_message(kind: str, name: str) -> str:
    return f'{kind} "{name}" restored.'


__all__ = [
    "NOTHING_TO_UNDO",
    "PROMPT_COPIED",
    "PROMPT_COPY_FAILED",
    "PROMPT_DELETED",
    "PROMPT_DELETE_CANCELLED",
    "PROMPT_DELETE_FAILED",
    "PROMPT_ID_MISSING",
    "PROMPT_RESTORED",
    "build_actionable_error",
    "build_actionable_success",
    "build_delete_prompt_confirmation",
    "build_delete_taxonomy_confirmation",
    "build_import_summary_message",
    "build_load_failure_message",
    "build_next_step_hint",
    "build_save_failure_message",
    "build_taxonomy_created_message",
    "build_taxonomy_deleted_message",
    "build_taxonomy_renamed_message",
    "build_taxonomy_restored_message",
    "describe_error",
]
