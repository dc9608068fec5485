"""Models for advisory collaborators (bundletool, build configuration)."""

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ValidationStatus(StrEnum):
    """Result of running the bundle validator on one AAB."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class BundleValidation(BaseModel):
    """Advisory bundletool verdict for one bundle."""

    model_config = ConfigDict(frozen=True)

    status: ValidationStatus
    """Passed, failed, or skipped when bundletool was unavailable."""

    output: str = ""
    """Raw combined tool output."""

    reason: str | None = None
    """Why validation was skipped."""


class BuildConfigFlag(StrEnum):
    """Build configuration signals relevant to 16 KB page size support."""

    MAX_PAGE_SIZE_ALIGNMENT = "max_page_size_alignment"
    """android.bundle.enableMaxPageSizeAlignmentFlag=true in gradle.properties."""

    DEPRECATED_UNCOMPRESSED_NATIVE_LIBS = "deprecated_uncompressed_native_libs"
    """Deprecated android.bundle.enableUncompressedNativeLibs is still set."""

    LEGACY_PACKAGING_DISABLED = "legacy_packaging_disabled"
    """packaging.jniLibs.useLegacyPackaging = false in the app build file."""

    LEGACY_PACKAGING_UNCLEAR = "legacy_packaging_unclear"
    """useLegacyPackaging is mentioned but its jniLibs value could not be read."""

    FLEXIBLE_PAGE_SIZES = "flexible_page_sizes"
    """ANDROID_SUPPORT_FLEXIBLE_PAGE_SIZES=ON passed to the native build."""


class BuildConfigReport(BaseModel):
    """Advisory findings from the project's Gradle files."""

    model_config = ConfigDict(frozen=True)

    project_root: Path
    """Directory the build files were looked up from."""

    files_checked: list[Path] = []
    """Build files that were found and read."""

    files_missing: list[Path] = []
    """Expected build files that were absent."""

    flags: list[BuildConfigFlag] = []
    """Flags detected, in a fixed order."""

    issues: list[str] = []
    """Required settings that are missing."""

    warnings: list[str] = []
    """Non-blocking concerns."""

    @property
    def skipped(self) -> bool:
        """True when none of the build files could be found."""
        return not self.files_checked

    def has(self, flag: BuildConfigFlag) -> bool:
        return flag in self.flags
