"""Advisory inspection of Gradle build files for 16 KB page size settings."""

import re
from pathlib import Path

from pagecheck.models.advisory import BuildConfigFlag, BuildConfigReport

GRADLE_PROPERTIES = Path("android") / "gradle.properties"
APP_BUILD_FILES = (
    Path("android") / "app" / "build.gradle",
    Path("android") / "app" / "build.gradle.kts",
)

MAX_PAGE_SIZE_PROPERTY = "android.bundle.enableMaxPageSizeAlignmentFlag"
UNCOMPRESSED_LIBS_PROPERTY = "android.bundle.enableUncompressedNativeLibs"

_MAX_PAGE_SIZE_RE = re.compile(
    rf"^\s*{re.escape(MAX_PAGE_SIZE_PROPERTY)}\s*=\s*true\s*$", re.MULTILINE
)
_UNCOMPRESSED_LIBS_RE = re.compile(
    rf"^\s*{re.escape(UNCOMPRESSED_LIBS_PROPERTY)}\b", re.MULTILINE
)
# jniLibs { useLegacyPackaging false } / jniLibs.useLegacyPackaging = false
_LEGACY_PACKAGING_FALSE_RE = re.compile(
    r"jniLibs[\s\S]{0,80}?useLegacyPackaging\s*=?\s*false"
)
_FLEXIBLE_PAGE_SIZES_RE = re.compile(r"ANDROID_SUPPORT_FLEXIBLE_PAGE_SIZES=ON")


def _read(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


class BuildConfigReader:
    """Read a project's Gradle files and report page size related flags."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def read(self) -> BuildConfigReport:
        """Inspect gradle.properties and the app build file.

        Missing files are recorded, never raised.
        """
        checked: list[Path] = []
        missing: list[Path] = []
        flags: list[BuildConfigFlag] = []
        issues: list[str] = []
        warnings: list[str] = []

        props_path = self.project_root / GRADLE_PROPERTIES
        props = _read(props_path) if props_path.is_file() else None
        if props is None:
            missing.append(props_path)
        else:
            checked.append(props_path)
            if _MAX_PAGE_SIZE_RE.search(props):
                flags.append(BuildConfigFlag.MAX_PAGE_SIZE_ALIGNMENT)
            else:
                issues.append(f"Missing: {MAX_PAGE_SIZE_PROPERTY}=true")
            if _UNCOMPRESSED_LIBS_RE.search(props):
                flags.append(BuildConfigFlag.DEPRECATED_UNCOMPRESSED_NATIVE_LIBS)
                warnings.append(f"Deprecated property: {UNCOMPRESSED_LIBS_PROPERTY}")

        app_gradle = next(
            (
                self.project_root / candidate
                for candidate in APP_BUILD_FILES
                if (self.project_root / candidate).is_file()
            ),
            None,
        )
        content = _read(app_gradle) if app_gradle is not None else None
        if app_gradle is None or content is None:
            missing.append(app_gradle or self.project_root / APP_BUILD_FILES[0])
        else:
            checked.append(app_gradle)
            if "useLegacyPackaging" in content:
                if _LEGACY_PACKAGING_FALSE_RE.search(content):
                    flags.append(BuildConfigFlag.LEGACY_PACKAGING_DISABLED)
                else:
                    flags.append(BuildConfigFlag.LEGACY_PACKAGING_UNCLEAR)
                    warnings.append("useLegacyPackaging value unclear")
            if _FLEXIBLE_PAGE_SIZES_RE.search(content):
                flags.append(BuildConfigFlag.FLEXIBLE_PAGE_SIZES)

        return BuildConfigReport(
            project_root=self.project_root,
            files_checked=checked,
            files_missing=missing,
            flags=flags,
            issues=issues,
            warnings=warnings,
        )
