"""CLI/bootstrap helpers for the PromptShare terminal client."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from promptshare.action_messages import build_actionable_error
from promptshare.config import (
    MAX_REQUEST_TIMEOUT_SECONDS,
    _coerce_base_url,
    is_valid_base_url,
    load_config,
)
from promptshare.models import CONFIG_APP_NAME, MAX_PAGE_SIZE, TAG_MATCH_MODES, UserConfig
from promptshare.themes import THEME_NAMES

logger = logging.getLogger(__name__)

# Debug log rotation: five files of at most 5 MiB
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Environment variables set (value) or cleared (None) per --color mode
_COLOR_ENV: dict[str, dict[str, str | None]] = {
    "never": {"NO_COLOR": "1", "FORCE_COLOR": None},
    "always": {"FORCE_COLOR": "1", "NO_COLOR": None},
    "auto": {"FORCE_COLOR": None},
}


def _configure_logging(debug: bool) -> None:
    """Send DEBUG logs to ``debug.log`` in the config dir, or silence logging.

    The TUI owns the terminal, so nothing is ever logged to stderr.
    """
    if not debug:
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_dir / "debug.log",
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _configure_color_mode(color_mode: str) -> None:
    """Export NO_COLOR / FORCE_COLOR hints for Rich and Textual."""
    for name, value in _COLOR_ENV.get(color_mode, _COLOR_ENV["auto"]).items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value


def _validate_interactive_tty() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptshare",
        description="Browse, edit and share prompts stored on a PromptShare server",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Server root, e.g. http://localhost:8000 (default: config value)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help=f"Prompts revealed per page (1-{MAX_PAGE_SIZE}; default: config value)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help=f"Request timeout in seconds (1-{MAX_REQUEST_TIMEOUT_SECONDS}; default: config value)",
    )
    parser.add_argument(
        "--tag-match",
        choices=list(TAG_MATCH_MODES),
        default=None,
        help="Tag filter matching: name_or_id (default) or id",
    )
    parser.add_argument(
        "--theme",
        choices=THEME_NAMES,
        default=None,
        help="Color theme (default: config value)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/promptshare/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    return parser


def apply_cli_overrides(config: UserConfig, args: argparse.Namespace) -> str | None:
    """Apply session-only flag values to ``config``.

    Returns an error message for the first invalid value, or None.
    """
    if args.base_url is not None:
        if not is_valid_base_url(args.base_url.strip()):
            return build_actionable_error(
                "use the server URL",
                why=f"{args.base_url!r} is not an http(s) URL",
                next_step="pass --base-url like http://localhost:8000",
            )
        config.base_url = _coerce_base_url(args.base_url)
    if args.page_size is not None:
        if not 1 <= args.page_size <= MAX_PAGE_SIZE:
            return build_actionable_error(
                "use the page size",
                why=f"{args.page_size} is outside 1-{MAX_PAGE_SIZE}",
                next_step=f"pass --page-size between 1 and {MAX_PAGE_SIZE}",
            )
        config.page_size = args.page_size
    if args.timeout is not None:
        if not 1 <= args.timeout <= MAX_REQUEST_TIMEOUT_SECONDS:
            return build_actionable_error(
                "use the request timeout",
                why=f"{args.timeout} is outside 1-{MAX_REQUEST_TIMEOUT_SECONDS}",
                next_step=f"pass --timeout between 1 and {MAX_REQUEST_TIMEOUT_SECONDS}",
            )
        config.request_timeout_seconds = args.timeout
    if args.tag_match is not None:
        config.tag_match_mode = args.tag_match
    if args.theme is not None:
        config.theme_name = args.theme
    return None


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    args = _build_parser().parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("promptshare starting, cwd=%s", Path.cwd())

    config = load_config_fn()
    error = apply_cli_overrides(config, args)
    if error is not None:
        print(error, file=sys.stderr)
        return 1

    if not validate_interactive_tty_fn():
        print(
            build_actionable_error(
                "start the interface",
                why="promptshare needs an interactive TTY",
                next_step="run it directly in a terminal, or see --help",
            ),
            file=sys.stderr,
        )
        return 2

    if app_factory is None:
        from promptshare.app import PromptShareApp as _PromptShareApp

        app_factory = _PromptShareApp

    app = app_factory(config=config)
    app.run()
    return 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_validate_interactive_tty",
    "apply_cli_overrides",
    "main",
]
