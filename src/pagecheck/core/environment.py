"""Environment discovery and prerequisite checks, resolved once per run."""

import platform
import shutil
from pathlib import Path

from pagecheck.core.bundletool import BUNDLETOOL_URL
from pagecheck.exceptions import ToolNotFoundError
from pagecheck.models.environment import RunConfig, ToolStatus
from pagecheck.utils.android_sdk import get_android_home, get_zipalign
from pagecheck.utils.config import BUNDLETOOL_URL_KEY, get_config_str
from pagecheck.utils.deps import (
    TOOL_INSTALL_HINTS,
    get_bundletool_command,
    get_java_version,
)


def discover_environment(
    project_root: Path = Path("."),
    *,
    validate_bundles: bool = True,
    check_build_config: bool = True,
    jobs: int = 1,
    use_flutter: bool = True,
) -> RunConfig:
    """Probe the filesystem and PATH and freeze the result into a RunConfig."""
    android_sdk = get_android_home(use_flutter=use_flutter)

    zipalign: Path | None = None
    if android_sdk is not None:
        try:
            zipalign = get_zipalign(android_sdk)
        except ToolNotFoundError:
            zipalign = None

    java = shutil.which("java")

    return RunConfig(
        project_root=project_root,
        android_sdk=android_sdk,
        zipalign=zipalign,
        java=java,
        bundletool_command=get_bundletool_command(java),
        bundletool_url=get_config_str(BUNDLETOOL_URL_KEY) or BUNDLETOOL_URL,
        validate_bundles=validate_bundles,
        check_build_config=check_build_config,
        jobs=max(1, jobs),
    )


def check_prerequisites(run_config: RunConfig) -> list[ToolStatus]:
    """Describe every tool the run may use.

    Only the Python runtime is required; the rest degrade advisory checks.
    """
    statuses = [
        ToolStatus(
            name="Python",
            found=True,
            detail=platform.python_version(),
            required=True,
        )
    ]

    if run_config.java:
        statuses.append(
            ToolStatus(
                name="Java",
                found=True,
                detail=get_java_version(run_config.java) or run_config.java,
            )
        )
    else:
        statuses.append(
            ToolStatus(
                name="Java",
                found=False,
                hint=TOOL_INSTALL_HINTS["java"],
            )
        )

    if run_config.android_sdk:
        statuses.append(
            ToolStatus(name="Android SDK", found=True, detail=str(run_config.android_sdk))
        )
    else:
        statuses.append(ToolStatus(name="Android SDK", found=False, hint="optional"))

    if run_config.zipalign:
        statuses.append(
            ToolStatus(name="zipalign", found=True, detail=str(run_config.zipalign))
        )
    else:
        statuses.append(
            ToolStatus(
                name="zipalign",
                found=False,
                hint=TOOL_INSTALL_HINTS["zipalign"],
            )
        )

    if run_config.bundletool_command:
        statuses.append(
            ToolStatus(
                name="bundletool",
                found=True,
                detail=" ".join(run_config.bundletool_command),
            )
        )
    else:
        statuses.append(
            ToolStatus(
                name="bundletool",
                found=False,
                detail=run_config.bundletool_url,
                hint=TOOL_INSTALL_HINTS["bundletool"],
            )
        )

    return statuses
