"""Native library classification against the 16 KB page boundary."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from pagecheck.core.offsets import effective_offset, page_remainder, validate_entry
from pagecheck.exceptions import OffsetComputationError
from pagecheck.models.artifact import (
    ROOT_MODULE,
    ArchiveEntry,
    ArtifactKind,
    LibraryRecord,
    OffsetAnomaly,
)

NATIVE_LIBRARY_SUFFIX = ".so"


@dataclass
class Classification:
    """Libraries of one artifact, grouped by module, plus excluded entries."""

    libraries: list[LibraryRecord] = field(default_factory=list)
    modules: dict[str, list[LibraryRecord]] = field(default_factory=dict)
    anomalies: list[OffsetAnomaly] = field(default_factory=list)

    def add(self, record: LibraryRecord) -> None:
        self.libraries.append(record)
        self.modules.setdefault(record.module, []).append(record)


def is_native_library(name: str) -> bool:
    """Check if an archive path names a native shared library."""
    return name.endswith(NATIVE_LIBRARY_SUFFIX)


def module_for(name: str, kind: ArtifactKind) -> str:
    """Module that owns a library path.

    Bundles keep one directory per module (``base/lib/arm64-v8a/libx.so``);
    packages are flat and map to the root module.
    """
    segments = name.split("/")
    if kind == ArtifactKind.BUNDLE and len(segments) >= 2:
        return segments[0]
    return ROOT_MODULE


def classify_entry(entry: ArchiveEntry, kind: ArtifactKind) -> LibraryRecord:
    """Build the LibraryRecord for one native library entry.

    Raises:
        OffsetComputationError: If the entry's metadata is inconsistent.
    """
    validate_entry(entry)
    offset = effective_offset(entry)
    remainder = page_remainder(offset)

    return LibraryRecord(
        library_name=entry.name.rsplit("/", 1)[-1],
        path=entry.name,
        module=module_for(entry.name, kind),
        effective_offset=offset,
        page_remainder=remainder,
        aligned=remainder == 0,
        uncompressed_size=entry.uncompressed_size,
        compressed=not entry.is_stored,
    )


def classify(entries: Iterable[ArchiveEntry], kind: ArtifactKind) -> Classification:
    """Classify every native library among ``entries``.

    Libraries with the same basename in different modules are kept apart;
    nothing is deduplicated.
    """
    result = Classification()

    for entry in entries:
        if not is_native_library(entry.name):
            continue
        try:
            result.add(classify_entry(entry, kind))
        except OffsetComputationError as e:
            result.anomalies.append(OffsetAnomaly(path=entry.name, reason=e.reason))

    return result
