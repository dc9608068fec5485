"""Artifact analysis: scan, classify, and reach a 16 KB compatibility verdict."""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Protocol

from pagecheck.core.bundle import has_manifest_record
from pagecheck.core.classifier import Classification, classify
from pagecheck.core.scanner import ArchiveScanner
from pagecheck.exceptions import ArtifactError
from pagecheck.models.advisory import BuildConfigReport, BundleValidation
from pagecheck.models.artifact import (
    AnalysisState,
    ArtifactFailure,
    ArtifactKind,
    ArtifactReport,
    BatchVerdict,
    Outcome,
)


class BundleValidatorLike(Protocol):
    def validate(self, bundle_path: Path) -> BundleValidation: ...


_TRANSITIONS: dict[AnalysisState, set[AnalysisState]] = {
    AnalysisState.UNOPENED: {AnalysisState.SCANNING, AnalysisState.FAILED},
    AnalysisState.SCANNING: {AnalysisState.CLASSIFYING, AnalysisState.FAILED},
    AnalysisState.CLASSIFYING: {AnalysisState.VERDICTED},
    AnalysisState.VERDICTED: set(),
    AnalysisState.FAILED: set(),
}


def build_report(
    artifact_path: Path,
    kind: ArtifactKind,
    size_bytes: int,
    classification: Classification,
    has_manifest: bool,
    bundle_validation: BundleValidation | None = None,
) -> ArtifactReport:
    """Combine one artifact's classification into its verdict.

    Packages are compatible only when every native library is aligned.
    Bundles are compatible when the manifest record is present and they carry
    at least one native library; Play regenerates aligned APKs from them, so
    individual offsets inside the bundle do not matter.
    """
    libraries = classification.libraries

    if kind == ArtifactKind.BUNDLE:
        compatible = has_manifest and bool(libraries)
    else:
        compatible = all(lib.aligned for lib in libraries)

    if not libraries:
        outcome = Outcome.NO_NATIVE_CODE
    elif compatible:
        outcome = Outcome.COMPATIBLE
    else:
        outcome = Outcome.INCOMPATIBLE

    return ArtifactReport(
        artifact_path=artifact_path,
        artifact_kind=kind,
        size_bytes=size_bytes,
        libraries=libraries,
        modules=classification.modules,
        has_manifest_record=has_manifest,
        compatible=compatible,
        state=AnalysisState.VERDICTED,
        outcome=outcome,
        anomalies=classification.anomalies,
        bundle_validation=bundle_validation,
    )


def failed_report(
    artifact_path: Path, kind: ArtifactKind, error: ArtifactError
) -> ArtifactReport:
    """Report for an artifact that could not be analyzed."""
    try:
        size_bytes = artifact_path.stat().st_size if artifact_path.is_file() else 0
    except OSError:
        size_bytes = 0

    return ArtifactReport(
        artifact_path=artifact_path,
        artifact_kind=kind,
        size_bytes=size_bytes,
        compatible=False,
        state=AnalysisState.FAILED,
        outcome=Outcome.ERROR,
        failure=ArtifactFailure(kind=error.kind, message=str(error)),
    )


class ArtifactAnalyzer:
    """Analyze a single AAB or APK for 16 KB page size compatibility."""

    def __init__(
        self,
        artifact_path: Path,
        kind: ArtifactKind | None = None,
        bundle_validator: BundleValidatorLike | None = None,
    ):
        """Initialize artifact analyzer.

        Args:
            artifact_path: Path to the AAB or APK to analyze.
            kind: Artifact kind. Inferred from the suffix when omitted.
            bundle_validator: Optional advisory validator run on bundles.
        """
        self.artifact_path = artifact_path.resolve()
        self.kind = kind or ArtifactKind.from_path(artifact_path)
        self.bundle_validator = bundle_validator
        self.state = AnalysisState.UNOPENED

    def _transition(self, new_state: AnalysisState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid analysis transition {self.state} -> {new_state} "
                f"for {self.artifact_path}"
            )
        self.state = new_state

    def analyze(self) -> ArtifactReport:
        """Analyze the artifact once and return its report.

        Per-artifact errors never propagate; they become a failed report.
        """
        scanner = ArchiveScanner(self.artifact_path)

        try:
            scanner.ensure_readable()
            size_bytes = self.artifact_path.stat().st_size
        except ArtifactError as e:
            self._transition(AnalysisState.FAILED)
            return failed_report(self.artifact_path, self.kind, e)

        self._transition(AnalysisState.SCANNING)
        try:
            entries = list(scanner)
        except ArtifactError as e:
            self._transition(AnalysisState.FAILED)
            return failed_report(self.artifact_path, self.kind, e)

        self._transition(AnalysisState.CLASSIFYING)
        classification = classify(entries, self.kind)
        has_manifest = has_manifest_record(entry.name for entry in entries)

        bundle_validation = None
        if self.kind == ArtifactKind.BUNDLE and self.bundle_validator is not None:
            bundle_validation = self.bundle_validator.validate(self.artifact_path)

        self._transition(AnalysisState.VERDICTED)
        return build_report(
            self.artifact_path,
            self.kind,
            size_bytes,
            classification,
            has_manifest,
            bundle_validation,
        )


def analyze_artifact(
    artifact_path: Path,
    bundle_validator: BundleValidatorLike | None = None,
) -> ArtifactReport:
    """Analyze one artifact with a fresh analyzer."""
    return ArtifactAnalyzer(artifact_path, bundle_validator=bundle_validator).analyze()


def analyze_batch(
    artifact_paths: Sequence[Path],
    *,
    jobs: int = 1,
    bundle_validator: BundleValidatorLike | None = None,
    build_config: BuildConfigReport | None = None,
) -> BatchVerdict:
    """Analyze every artifact and aggregate the verdicts.

    Args:
        artifact_paths: Artifacts to analyze.
        jobs: Maximum number of artifacts analyzed in parallel.
        bundle_validator: Optional advisory validator run on bundles.
        build_config: Advisory build configuration findings to attach.

    Returns:
        BatchVerdict with reports in the same order as ``artifact_paths``.
    """
    if jobs <= 1 or len(artifact_paths) <= 1:
        reports = [analyze_artifact(path, bundle_validator) for path in artifact_paths]
    else:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            reports = list(
                pool.map(
                    lambda path: analyze_artifact(path, bundle_validator),
                    artifact_paths,
                )
            )

    return BatchVerdict.from_reports(reports, build_config=build_config)
