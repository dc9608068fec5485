"""Discovery of build artifacts in conventional build output directories."""

from pathlib import Path

from pagecheck.exceptions import DiscoveryError

BUNDLE_PATTERN = "*.aab"
RELEASE_APK_PATTERN = "*-release.apk"


def _under_build_dir(path: Path, root: Path) -> bool:
    return "build" in path.relative_to(root).parts[:-1]


def find_build_artifacts(root: Path) -> list[Path]:
    """Find AABs and release APKs below any ``build/`` directory of ``root``.

    Returns:
        Bundles first, then APKs, each sorted by path.
    """
    root = root.resolve()
    if not root.is_dir():
        return []

    bundles = sorted(
        p
        for p in root.rglob(BUNDLE_PATTERN)
        if p.is_file() and _under_build_dir(p, root)
    )
    apks = sorted(
        p
        for p in root.rglob(RELEASE_APK_PATTERN)
        if p.is_file() and _under_build_dir(p, root)
    )
    return bundles + apks


def require_artifacts(root: Path) -> list[Path]:
    """Like :func:`find_build_artifacts` but fails when nothing is found.

    Raises:
        DiscoveryError: If no AAB or APK exists in any build directory.
    """
    artifacts = find_build_artifacts(root)
    if not artifacts:
        raise DiscoveryError(f"No AAB or APK files found in build directories of {root}")
    return artifacts
