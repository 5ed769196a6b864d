"""Configuration persistence — load and save the user config file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from platformdirs import user_config_dir

from promptshare.models import (
    CONFIG_APP_NAME,
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TAG_MATCH_MODE,
    MAX_PAGE_SIZE,
    TAG_MATCH_MODES,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract — _dict_to_config() guarantees valid output for any input:
#
#   Field                    Rule                          Handler
#   ───────────────────────  ────────────────────────────  ─────────────────────
#   base_url                 http(s) URL with a host       _coerce_base_url
#   page_size                1 ≤ x ≤ 200                   _coerce_page_size
#   request_timeout_seconds  1 ≤ x ≤ 120                   _coerce_timeout
#   tag_match_mode           in TAG_MATCH_MODES            _dict_to_config
#   recent_searches          list of str, at most 10       _parse_recent_searches
#   scalar fields            type-checked via _safe_get()  _dict_to_config
#
CONFIG_FILENAME = "config.json"
MAX_REQUEST_TIMEOUT_SECONDS = 120
MAX_RECENT_SEARCHES = 10


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/promptshare/config.json
    - macOS: ~/Library/Application Support/promptshare/config.json
    - Windows: %APPDATA%/promptshare/config.json
    """
    return Path(user_config_dir(CONFIG_APP_NAME)) / CONFIG_FILENAME


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "base_url": config.base_url,
        "page_size": _coerce_page_size(config.page_size),
        "request_timeout_seconds": _coerce_timeout(config.request_timeout_seconds),
        "tag_match_mode": config.tag_match_mode,
        "theme_name": config.theme_name,
        "author_name": config.author_name,
        "recent_searches": config.recent_searches[:MAX_RECENT_SEARCHES],
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type):
        return default
    return value


def is_valid_base_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def _coerce_base_url(value: Any) -> str:
    if isinstance(value, str) and is_valid_base_url(value.strip()):
        return value.strip().rstrip("/")
    return DEFAULT_BASE_URL


def _coerce_page_size(value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        return DEFAULT_PAGE_SIZE
    return max(1, min(value, MAX_PAGE_SIZE))


def _coerce_timeout(value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        return DEFAULT_REQUEST_TIMEOUT_SECONDS
    return max(1, min(value, MAX_REQUEST_TIMEOUT_SECONDS))


def _parse_recent_searches(data: dict[str, Any]) -> list[str]:
    raw = data.get("recent_searches", [])
    if not isinstance(raw, list):
        return []
    return [s for s in raw if isinstance(s, str) and s.strip()][:MAX_RECENT_SEARCHES]


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig, replacing invalid values with defaults."""
    if not isinstance(data, dict):
        raise TypeError(f"Config root must be an object, got {type(data).__name__}")
    tag_match_mode = _safe_get(data, "tag_match_mode", DEFAULT_TAG_MATCH_MODE, str)
    if tag_match_mode not in TAG_MATCH_MODES:
        tag_match_mode = DEFAULT_TAG_MATCH_MODE
    return UserConfig(
        base_url=_coerce_base_url(data.get("base_url")),
        page_size=_coerce_page_size(data.get("page_size")),
        request_timeout_seconds=_coerce_timeout(data.get("request_timeout_seconds")),
        tag_match_mode=tag_match_mode,
        theme_name=_safe_get(data, "theme_name", "monokai", str),
        author_name=_safe_get(data, "author_name", "", str),
        recent_searches=_parse_recent_searches(data),
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return UserConfig(config_defaulted=True)
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
        return UserConfig(config_defaulted=True)
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Writes to a tempfile in the config directory and swaps it in with
    os.replace(), so an interrupted save never leaves a partial file.

    Returns True on success, False on failure.
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        json_str = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


def remember_search(config: UserConfig, query: str) -> None:
    """Move ``query`` to the front of the recent-search list."""
    cleaned = query.strip()
    if not cleaned:
        return
    recent = [q for q in config.recent_searches if q != cleaned]
    recent.insert(0, cleaned)
    config.recent_searches = recent[:MAX_RECENT_SEARCHES]


__all__ = [
    "CONFIG_APP_NAME",
    "CONFIG_FILENAME",
    "MAX_RECENT_SEARCHES",
    "_config_to_dict",
    "_dict_to_config",
    "_safe_get",
    "get_config_path",
    "is_valid_base_url",
    "load_config",
    "remember_search",
    "save_config",
]
