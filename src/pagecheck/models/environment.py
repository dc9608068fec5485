"""Models for the resolved run environment."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ToolStatus(BaseModel):
    """Availability of one prerequisite."""

    model_config = ConfigDict(frozen=True)

    name: str
    """Tool name (e.g., 'Java')."""

    found: bool
    """Whether the tool was located."""

    detail: str | None = None
    """Version string or path."""

    required: bool = False
    """Whether the run cannot proceed without it."""

    hint: str | None = None
    """What the tool is needed for when it is missing."""


class RunConfig(BaseModel):
    """Immutable run configuration resolved once at batch start."""

    model_config = ConfigDict(frozen=True)

    project_root: Path = Path(".")
    """Root used for artifact discovery and build configuration lookup."""

    android_sdk: Path | None = None
    """Android SDK root, if found."""

    zipalign: Path | None = None
    """zipalign binary, if found."""

    java: str | None = None
    """Path to the java executable, if on PATH."""

    bundletool_command: list[str] | None = None
    """Preinstalled bundletool command, if any (otherwise it is downloaded)."""

    bundletool_url: str | None = None
    """Download URL used when no local bundletool is configured."""

    validate_bundles: bool = True
    """Run bundletool on bundles."""

    check_build_config: bool = True
    """Inspect the project's Gradle files."""

    jobs: int = 1
    """Maximum number of artifacts analyzed in parallel."""
