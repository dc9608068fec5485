"""User configuration file (~/.pagecheck/config.json).

Recognized keys::

    {
        "bundletool_path": "~/tools/bundletool-all-1.17.2.jar",
        "bundletool_url": "https://mirror.example/bundletool-all-1.17.2.jar",
        "android_sdk": "~/Android/Sdk",
        "jobs": 4
    }

Environment variables (ANDROID_HOME, BUNDLETOOL_JAR) take precedence over
these values. Unknown keys are ignored and an unreadable file counts as empty.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".pagecheck"
CONFIG_FILE = CONFIG_DIR / "config.json"

BUNDLETOOL_PATH_KEY = "bundletool_path"
BUNDLETOOL_URL_KEY = "bundletool_url"
ANDROID_SDK_KEY = "android_sdk"
JOBS_KEY = "jobs"


@lru_cache(maxsize=1)
def load_config() -> dict[str, Any]:
    """Read the config file once; later calls reuse the parsed mapping."""

    try:
        data = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}

    return data if isinstance(data, dict) else {}


def get_config_value(key: str, default: Any | None = None) -> Any | None:
    """Fetch a configuration value by key."""

    return load_config().get(key, default)


def get_config_str(key: str) -> str | None:
    """Fetch a non-empty string value; anything else reads as unset."""

    value = get_config_value(key)
    if isinstance(value, str) and value:
        return value
    return None


def get_config_int(key: str, default: int) -> int:
    """Fetch a positive integer value, falling back to ``default``."""

    value = get_config_value(key)
    # bool is an int subclass; "jobs": true is not a job count
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


def reload_config() -> None:
    """Force the cached configuration to be reloaded on next access."""

    load_config.cache_clear()
