"""Bundle structure checks."""

from collections.abc import Iterable

# Reserved top-level entry written by bundletool/AGP into every app bundle
BUNDLE_MANIFEST_RECORD = "BundleConfig.pb"


def has_manifest_record(names: Iterable[str]) -> bool:
    """Check whether the bundle manifest record exists by exact name.

    This only shows the container is a well-formed bundle. It says nothing
    about byte alignment; Google Play regenerates aligned APKs from bundles.
    """
    return any(name == BUNDLE_MANIFEST_RECORD for name in names)
