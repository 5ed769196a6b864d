"""System clipboard access through platform command-line tools."""

from __future__ import annotations

import logging
import platform
import subprocess
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Seconds to wait for a clipboard helper before giving up
SUBPROCESS_TIMEOUT = 5


def get_clipboard_command_plan(system: str) -> tuple[list[list[str]], str] | None:
    """Return clipboard command candidates and input encoding for a platform."""
    if system == "Darwin":
        return ([["pbcopy"]], "utf-8")
    if system == "Linux":
        return (
            [
                ["wl-copy"],
                ["xclip", "-selection", "clipboard"],
                ["xsel", "--clipboard", "--input"],
            ],
            "utf-8",
        )
    if system == "Windows":
        return ([["clip"]], "utf-16")
    return None


def copy_text(
    text: str,
    *,
    system: str | None = None,
    run: Callable[..., Any] = subprocess.run,
) -> bool:
    """Copy ``text`` to the system clipboard. Returns True on success.

    Each candidate command is tried in order; failures are logged at warning
    level and reported as False rather than raised.
    """
    system = system or platform.system()
    plan = get_clipboard_command_plan(system)
    if plan is None:
        logger.warning("Clipboard copy failed: unsupported platform %s", system)
        return False
    commands, encoding = plan
    payload = text.encode(encoding)
    last_error: Exception | None = None
    for command in commands:
        try:
            run(  # nosec B603
                command,
                input=payload,
                check=True,
                shell=False,
                timeout=SUBPROCESS_TIMEOUT,
            )
            return True
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            last_error = e
    logger.warning("Clipboard copy failed: %s", last_error)
    return False


__all__ = ["SUBPROCESS_TIMEOUT", "copy_text", "get_clipboard_command_plan"]
