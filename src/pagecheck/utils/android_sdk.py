"""Android SDK path detection utilities."""

import os
import platform
import re
import shutil
from pathlib import Path

from pagecheck.exceptions import ProcessError, ToolNotFoundError
from pagecheck.utils.config import ANDROID_SDK_KEY, get_config_str
from pagecheck.utils.process import run_tool

FLUTTER_SDK_PATTERN = re.compile(r"Android SDK at (.+)")


def _is_sdk_root(path: Path) -> bool:
    return (path / "build-tools").is_dir()


def _sdk_from_flutter() -> Path | None:
    """Ask ``flutter doctor`` where its Android SDK lives."""
    flutter = shutil.which("flutter")
    if flutter is None:
        return None

    try:
        result = run_tool([flutter, "doctor", "-v"], check=False, timeout=120)
    except ProcessError:
        return None

    match = FLUTTER_SDK_PATTERN.search(result.combined_output)
    if match:
        path = Path(match.group(1).strip())
        if path.is_dir():
            return path
    return None


def get_android_home(*, use_flutter: bool = True) -> Path | None:
    """Get Android SDK root directory.

    Checks environment variables, the user config, common installation
    locations, and finally the SDK reported by Flutter.

    Returns:
        Path to Android SDK root, or None if not found.
    """
    candidates: list[str | None] = [
        os.environ.get("ANDROID_HOME"),
        os.environ.get("ANDROID_SDK_ROOT"),
        get_config_str(ANDROID_SDK_KEY),
    ]
    for value in candidates:
        if value:
            path = Path(value).expanduser()
            if _is_sdk_root(path):
                return path

    system = platform.system()
    home = Path.home()

    common_locations: list[Path] = []
    if system == "Darwin":  # macOS
        common_locations = [
            home / "Library" / "Android" / "sdk",
            Path("/usr/local/android-sdk"),
            Path("/opt/android-sdk"),
        ]
    elif system == "Linux":
        common_locations = [
            home / "Android" / "Sdk",
            home / "android-sdk",
            Path("/usr/local/android-sdk"),
            Path("/opt/android-sdk"),
        ]
    elif system == "Windows":
        common_locations = [
            home / "AppData" / "Local" / "Android" / "Sdk",
            Path("C:/Android/sdk"),
        ]

    for location in common_locations:
        if _is_sdk_root(location):
            return location

    if use_flutter:
        return _sdk_from_flutter()

    return None


def get_build_tools_path(android_home: Path, min_version: str = "30.0.0") -> Path:
    """Get the latest Android build-tools directory.

    Args:
        android_home: Android SDK root.
        min_version: Minimum required version (e.g., "30.0.0").

    Returns:
        Path to build-tools directory (e.g., .../build-tools/35.0.0/).

    Raises:
        ToolNotFoundError: If suitable build-tools are not found.
    """
    build_tools_dir = android_home / "build-tools"
    if not build_tools_dir.is_dir():
        raise ToolNotFoundError(
            "Android build-tools",
            f"Install build-tools via Android SDK Manager in {android_home}",
        )

    versions: list[tuple[tuple[int, ...], Path]] = []
    min_version_tuple = tuple(int(x) for x in min_version.split("."))

    for version_dir in build_tools_dir.iterdir():
        if not version_dir.is_dir():
            continue
        try:
            version_tuple = tuple(int(x) for x in version_dir.name.split("."))
        except ValueError:
            # Skip non-version directories (e.g. "35.0.0-rc1")
            continue
        if version_tuple >= min_version_tuple:
            versions.append((version_tuple, version_dir))

    if not versions:
        raise ToolNotFoundError(
            f"Android build-tools >= {min_version}",
            f"Install build-tools via Android SDK Manager in {android_home}",
        )

    versions.sort(reverse=True)
    return versions[0][1]


def get_zipalign(android_home: Path) -> Path:
    """Get path to the zipalign binary of the latest build-tools.

    Raises:
        ToolNotFoundError: If zipalign not found.
    """
    build_tools = get_build_tools_path(android_home)
    name = "zipalign.exe" if platform.system() == "Windows" else "zipalign"
    zipalign = build_tools / name

    if not zipalign.is_file():
        raise ToolNotFoundError(
            "zipalign",
            f"Expected at {zipalign}, install via Android SDK Manager",
        )

    return zipalign
