"""Tests for CLI parsing, overrides, logging setup and the main entry point."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from promptshare.cli import (
    _build_parser,
    _configure_color_mode,
    _configure_logging,
    apply_cli_overrides,
    main,
)
from promptshare.models import UserConfig


def _args(*argv: str) -> argparse.Namespace:
    return _build_parser().parse_args(list(argv))


def _run_main(argv, *, config=None, tty=True, app_factory=None):
    config = config or UserConfig()
    app_factory = app_factory or MagicMock()
    code = main(
        argv,
        load_config_fn=lambda: config,
        configure_logging_fn=lambda _debug: None,
        configure_color_mode_fn=lambda _mode: None,
        validate_interactive_tty_fn=lambda: tty,
        app_factory=app_factory,
    )
    return code, app_factory


# ── Overrides ─────────────────────────────────────────────────────────────


class TestApplyCliOverrides:
    def test_no_flags_leave_config_untouched(self):
        config = UserConfig()
        assert apply_cli_overrides(config, _args()) is None
        assert config == UserConfig()

    def test_all_flags_apply(self):
        config = UserConfig()
        args = _args(
            "--base-url",
            "https://prompts.example.com/",
            "--page-size",
            "5",
            "--timeout",
            "30",
            "--tag-match",
            "id",
            "--theme",
            "solarized-dark",
        )

        assert apply_cli_overrides(config, args) is None

        assert config.base_url == "https://prompts.example.com"
        assert config.page_size == 5
        assert config.request_timeout_seconds == 30
        assert config.tag_match_mode == "id"
        assert config.theme_name == "solarized-dark"

    def test_invalid_base_url(self):
        error = apply_cli_overrides(UserConfig(), _args("--base-url", "localhost:8000"))
        assert error is not None
        assert error.startswith("Could not use the server URL.")
        assert "Next step:" in error

    @pytest.mark.parametrize("value", ["0", "201"])
    def test_page_size_out_of_range(self, value):
        error = apply_cli_overrides(UserConfig(), _args("--page-size", value))
        assert error is not None
        assert "page size" in error

    def test_timeout_out_of_range(self):
        error = apply_cli_overrides(UserConfig(), _args("--timeout", "500"))
        assert error is not None
        assert "--timeout" in error

    def test_unknown_tag_match_is_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            _args("--tag-match", "fuzzy")


# ── main() ────────────────────────────────────────────────────────────────


class TestMain:
    def test_runs_app_with_loaded_config(self):
        config = UserConfig()
        code, factory = _run_main(["--page-size", "7"], config=config)

        assert code == 0
        factory.assert_called_once_with(config=config)
        factory.return_value.run.assert_called_once_with()
        assert config.page_size == 7

    def test_invalid_override_exits_1(self, capsys):
        code, factory = _run_main(["--base-url", "nope"])

        assert code == 1
        factory.assert_not_called()
        assert "Could not use the server URL." in capsys.readouterr().err

    def test_non_tty_exits_2(self, capsys):
        code, factory = _run_main([], tty=False)

        assert code == 2
        factory.assert_not_called()
        assert "interactive TTY" in capsys.readouterr().err

    def test_no_color_wins_over_color(self):
        modes: list[str] = []
        main(
            ["--color", "always", "--no-color"],
            load_config_fn=UserConfig,
            configure_logging_fn=lambda _debug: None,
            configure_color_mode_fn=modes.append,
            validate_interactive_tty_fn=lambda: False,
            app_factory=MagicMock(),
        )
        assert modes == ["never"]

    def test_debug_flag_is_forwarded(self):
        debug_values: list[bool] = []
        main(
            ["--debug"],
            load_config_fn=UserConfig,
            configure_logging_fn=debug_values.append,
            configure_color_mode_fn=lambda _mode: None,
            validate_interactive_tty_fn=lambda: False,
            app_factory=MagicMock(),
        )
        assert debug_values == [True]


# ── Environment setup ─────────────────────────────────────────────────────


class TestColorMode:
    def test_never_sets_no_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.delenv("NO_COLOR", raising=False)
        _configure_color_mode("never")
        assert os.environ["NO_COLOR"] == "1"
        assert "FORCE_COLOR" not in os.environ

    def test_always_sets_force_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        _configure_color_mode("always")
        assert os.environ["FORCE_COLOR"] == "1"
        assert "NO_COLOR" not in os.environ

    def test_auto_clears_force_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        _configure_color_mode("auto")
        assert "FORCE_COLOR" not in os.environ


class TestDebugLogging:
    """Verify --debug configures file logging."""

    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        handlers = list(logging.root.handlers)
        level = logging.root.level
        yield
        for handler in logging.root.handlers:
            if handler not in handlers:
                handler.close()
        logging.root.handlers[:] = handlers
        logging.root.setLevel(level)
        logging.disable(logging.NOTSET)

    def test_configure_logging_disabled_by_default(self):
        _configure_logging(debug=False)
        assert logging.root.manager.disable >= logging.CRITICAL

    def test_configure_logging_creates_file_handler(self, tmp_path: Path):
        with patch("promptshare.cli.user_config_dir", return_value=str(tmp_path)):
            _configure_logging(debug=True)

        handler = logging.root.handlers[-1]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert logging.root.level == logging.DEBUG
        assert handler.baseFilename == str(tmp_path / "debug.log")
        assert logging.getLogger("httpx").level == logging.WARNING
