"""Models for artifact analysis results."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, computed_field

from pagecheck.models.advisory import BuildConfigReport, BundleValidation

ROOT_MODULE = "root"
"""Sentinel module for libraries that do not live under a bundle module."""


class ArtifactKind(StrEnum):
    """Distribution format of an artifact."""

    BUNDLE = "bundle"
    PACKAGE = "package"

    @classmethod
    def from_path(cls, path: Path) -> "ArtifactKind":
        """Infer the kind from the file suffix (.aab is a bundle, anything else a package)."""
        if path.suffix.lower() == ".aab":
            return cls.BUNDLE
        return cls.PACKAGE

    @property
    def label(self) -> str:
        return "AAB" if self is ArtifactKind.BUNDLE else "APK"


class AnalysisState(StrEnum):
    """Per-artifact analysis state."""

    UNOPENED = "unopened"
    SCANNING = "scanning"
    CLASSIFYING = "classifying"
    VERDICTED = "verdicted"
    FAILED = "failed"


class Outcome(StrEnum):
    """Human-facing classification of one artifact report."""

    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    NO_NATIVE_CODE = "no_native_code"
    ERROR = "error"


class BatchStatus(StrEnum):
    """Final classification of a whole run."""

    ALL_COMPATIBLE = "all_compatible"
    SOME_INCOMPATIBLE = "some_incompatible"
    NOT_EVALUATED = "not_evaluated"


@dataclass(frozen=True)
class ArchiveEntry:
    """One record of a container's directory listing.

    ``filename_length`` and ``extra_field_length`` come from the entry's own
    local file header. They are ``None`` when that header could not be read,
    in which case ``local_header_error`` holds the cause.
    """

    name: str
    header_offset: int
    compressed_size: int
    uncompressed_size: int
    compress_type: int
    filename_length: int | None
    extra_field_length: int | None
    local_header_error: str | None = None

    @property
    def is_stored(self) -> bool:
        """Check if the entry payload is stored without compression."""
        return self.compress_type == 0


class LibraryRecord(BaseModel):
    """A classified native library."""

    model_config = ConfigDict(frozen=True)

    library_name: str
    """Basename of the library (e.g., 'libapp.so')."""

    path: str
    """Full entry path inside the archive."""

    module: str
    """Bundle module, or 'root' for package artifacts."""

    effective_offset: int
    """Absolute byte offset where the library payload starts."""

    page_remainder: int
    """effective_offset modulo the 16 KB page size."""

    aligned: bool
    """Whether the payload starts on a 16 KB boundary."""

    uncompressed_size: int
    """Library size in bytes."""

    compressed: bool = False
    """Whether the entry is compressed inside the archive."""


class OffsetAnomaly(BaseModel):
    """An entry excluded from classification because its metadata is inconsistent."""

    model_config = ConfigDict(frozen=True)

    path: str
    reason: str


class ArtifactFailure(BaseModel):
    """Why an artifact could not be analyzed."""

    model_config = ConfigDict(frozen=True)

    kind: str
    """Error kind ('artifact_not_found' or 'archive_unreadable')."""

    message: str
    """Concrete cause, including the artifact path."""


class ArtifactReport(BaseModel):
    """Analysis outcome of one AAB or APK."""

    model_config = ConfigDict(frozen=True)

    artifact_path: Path
    """Path to the analyzed artifact."""

    artifact_kind: ArtifactKind
    """Bundle (.aab) or package (.apk)."""

    size_bytes: int = 0
    """Artifact file size."""

    libraries: list[LibraryRecord] = []
    """Native libraries in archive directory order."""

    modules: dict[str, list[LibraryRecord]] = {}
    """Libraries grouped by module, in first-seen order."""

    has_manifest_record: bool = False
    """Whether the bundle manifest record (BundleConfig.pb) is present."""

    compatible: bool = False
    """Verdict for this artifact."""

    state: AnalysisState = AnalysisState.UNOPENED
    """Final state of the analysis."""

    outcome: Outcome = Outcome.ERROR
    """Human-facing classification of the verdict."""

    anomalies: list[OffsetAnomaly] = []
    """Library entries excluded because their offsets could not be computed."""

    failure: ArtifactFailure | None = None
    """Set when the artifact could not be analyzed."""

    bundle_validation: BundleValidation | None = None
    """Advisory bundletool result (bundles only)."""

    @property
    def failed(self) -> bool:
        return self.state == AnalysisState.FAILED

    @property
    def misaligned(self) -> list[LibraryRecord]:
        """Libraries that do not start on a 16 KB boundary."""
        return [lib for lib in self.libraries if not lib.aligned]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def aligned_count(self) -> int:
        return sum(1 for lib in self.libraries if lib.aligned)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def misaligned_count(self) -> int:
        return len(self.libraries) - self.aligned_count


class BatchVerdict(BaseModel):
    """Aggregate over all artifacts processed in one run."""

    model_config = ConfigDict(frozen=True)

    reports: list[ArtifactReport]
    """Artifact reports in input order."""

    overall_compatible: bool
    """Logical AND over every report's verdict."""

    build_config: BuildConfigReport | None = None
    """Advisory build configuration findings."""

    @classmethod
    def from_reports(
        cls,
        reports: list[ArtifactReport],
        build_config: BuildConfigReport | None = None,
    ) -> "BatchVerdict":
        """Combine artifact reports. An empty batch is never compatible."""
        overall = bool(reports) and all(report.compatible for report in reports)
        return cls(
            reports=list(reports),
            overall_compatible=overall,
            build_config=build_config,
        )

    @property
    def bundle_count(self) -> int:
        return sum(1 for r in self.reports if r.artifact_kind == ArtifactKind.BUNDLE)

    @property
    def package_count(self) -> int:
        return sum(1 for r in self.reports if r.artifact_kind == ArtifactKind.PACKAGE)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> BatchStatus:
        """Classify the run: all compatible, some incompatible, or nothing evaluated."""
        if not self.reports or all(r.failed for r in self.reports):
            return BatchStatus.NOT_EVALUATED
        if self.overall_compatible:
            return BatchStatus.ALL_COMPATIBLE
        return BatchStatus.SOME_INCOMPATIBLE
