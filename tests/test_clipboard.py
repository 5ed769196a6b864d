"""Tests for clipboard command selection and fallback."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock

import pytest

from promptshare.clipboard import SUBPROCESS_TIMEOUT, copy_text, get_clipboard_command_plan


@pytest.mark.parametrize(
    ("system", "first", "encoding"),
    [
        ("Darwin", ["pbcopy"], "utf-8"),
        ("Linux", ["wl-copy"], "utf-8"),
        ("Windows", ["clip"], "utf-16"),
    ],
)
def test_command_plan(system, first, encoding) -> None:
    plan = get_clipboard_command_plan(system)
    assert plan is not None
    commands, plan_encoding = plan
    assert commands[0] == first
    assert plan_encoding == encoding


def test_unknown_platform_has_no_plan() -> None:
    assert get_clipboard_command_plan("Plan9") is None


def test_copy_uses_first_working_command() -> None:
    run = MagicMock()

    assert copy_text("hello", system="Darwin", run=run) is True

    run.assert_called_once_with(
        ["pbcopy"], input=b"hello", check=True, shell=False, timeout=SUBPROCESS_TIMEOUT
    )


def test_copy_falls_through_linux_candidates() -> None:
    run = MagicMock(
        side_effect=[FileNotFoundError("wl-copy"), subprocess.CalledProcessError(1, "xclip"), None]
    )

    assert copy_text("hello", system="Linux", run=run) is True

    assert run.call_count == 3
    assert run.call_args.args[0] == ["xsel", "--clipboard", "--input"]


def test_copy_returns_false_when_every_command_fails(caplog) -> None:
    run = MagicMock(side_effect=subprocess.TimeoutExpired("pbcopy", SUBPROCESS_TIMEOUT))

    with caplog.at_level("WARNING", logger="promptshare.clipboard"):
        assert copy_text("hello", system="Darwin", run=run) is False

    assert "Clipboard copy failed" in caplog.text


def test_copy_on_unsupported_platform() -> None:
    run = MagicMock()
    assert copy_text("hello", system="Plan9", run=run) is False
    run.assert_not_called()
