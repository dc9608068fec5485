"""External tool dependency checker."""

from __future__ import annotations

import os
import re
import shutil
from pathlib import Path
from typing import Final

from pagecheck.exceptions import ProcessError
from pagecheck.utils.config import BUNDLETOOL_PATH_KEY, get_config_str
from pagecheck.utils.process import run_tool

# Install hints for external tools
TOOL_INSTALL_HINTS: dict[str, str] = {
    "java": "Install a JDK and ensure `java` is on PATH (needed for bundletool)",
    "bundletool": (
        "https://github.com/google/bundletool (set BUNDLETOOL_JAR, "
        "configure ~/.pagecheck/config.json, or let pagecheck download it)"
    ),
    "zipalign": "Part of Android SDK build-tools (set ANDROID_HOME)",
}

BUNDLETOOL_ENV_VAR: Final[str] = "BUNDLETOOL_JAR"
BUNDLETOOL_JAR_NAME: Final[str] = "bundletool.jar"

JAVA_VERSION_PATTERN = re.compile(r'version "([^"]+)"')


def get_java_version(java: str) -> str | None:
    """Return the version reported by ``java -version`` (printed on stderr)."""

    try:
        result = run_tool([java, "-version"], check=False, timeout=30)
    except ProcessError:
        return None

    match = JAVA_VERSION_PATTERN.search(result.combined_output)
    if match:
        return match.group(1)
    first_line = result.combined_output.splitlines()[:1]
    return first_line[0] if first_line else None


def _resolve_jar_path(raw_value: str | None) -> Path | None:
    if not raw_value:
        return None

    candidate = Path(raw_value).expanduser()
    if candidate.is_file():
        return candidate

    if candidate.is_dir():
        jar_candidate = candidate / BUNDLETOOL_JAR_NAME
        if jar_candidate.is_file():
            return jar_candidate

    return None


def get_bundletool_command(java: str | None = None) -> list[str] | None:
    """Resolve a preinstalled bundletool via env/config/PATH."""

    jar_path = _resolve_jar_path(os.environ.get(BUNDLETOOL_ENV_VAR))
    if jar_path is None:
        jar_path = _resolve_jar_path(get_config_str(BUNDLETOOL_PATH_KEY))

    if jar_path is not None:
        return [java or "java", "-jar", str(jar_path)]

    wrapper = shutil.which("bundletool")
    if wrapper:
        return [wrapper]

    return None
