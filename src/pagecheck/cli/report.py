"""Rich rendering of analysis results."""

from datetime import datetime

from rich.markup import escape
from rich.table import Table

from pagecheck.models.advisory import BuildConfigReport, ValidationStatus
from pagecheck.models.artifact import (
    ArtifactKind,
    ArtifactReport,
    BatchStatus,
    BatchVerdict,
    Outcome,
)
from pagecheck.models.environment import ToolStatus
from pagecheck.utils.output import console

MAX_MISALIGNED_SHOWN = 10

NEXT_STEPS: dict[tuple[ArtifactKind, bool], list[str]] = {
    (ArtifactKind.BUNDLE, True): [
        "Upload the AAB to Google Play Console",
        "Google Play generates 16 KB aligned APKs from it",
        "The app runs on both 4 KB and 16 KB page size devices",
    ],
    (ArtifactKind.BUNDLE, False): [
        "Edit android/gradle.properties",
        "Add: android.bundle.enableMaxPageSizeAlignmentFlag=true",
        "Rebuild the AAB: flutter build appbundle --release",
    ],
    (ArtifactKind.PACKAGE, True): [
        "The APK can be distributed directly",
    ],
    (ArtifactKind.PACKAGE, False): [
        "Build an AAB instead (recommended for Play Store): "
        "flutter build appbundle --release",
        "Or re-align the APK with zipalign -P 16",
    ],
}


def format_size(size_bytes: int) -> str:
    """Human-readable size in MB with two decimals."""
    return f"{size_bytes / (1024 * 1024):.2f} MB"


def render_prerequisites(statuses: list[ToolStatus]) -> None:
    """Print one line per prerequisite."""
    console.print_section("Checking Prerequisites")
    for status in statuses:
        if status.found:
            console.print_success(f"{status.name}: {status.detail}")
        elif status.required:
            console.print_error(f"{status.name} not found (required)")
        else:
            hint = f" ({status.hint})" if status.hint else ""
            console.print_warning(f"{status.name} not found{hint}")


def render_build_config(report: BuildConfigReport) -> None:
    """Print advisory build configuration findings."""
    console.print_section("Checking Build Configuration")

    for path in report.files_missing:
        console.print_warning(f"File not found: {path}")

    if report.skipped:
        console.print_info("Build configuration check skipped")
        return

    for path in report.files_checked:
        console.print_info(f"Analyzed: {path}")
    for flag in report.flags:
        console.print_debug(f"flag: {flag.value}")
    for issue in report.issues:
        console.print_error(issue)
    for warning in report.warnings:
        console.print_warning(warning)
    if not report.issues:
        console.print_success("No build configuration issues")


def _render_libraries(report: ArtifactReport) -> None:
    if report.artifact_kind == ArtifactKind.BUNDLE:
        console.print(f"  Native Libraries: {len(report.libraries)}")
        console.print(f"  Modules: {len(report.modules)}")
        manifest = (
            "[green]present[/green]"
            if report.has_manifest_record
            else "[red]missing[/red]"
        )
        console.print(f"  Bundle Config: {manifest}")

        if report.modules:
            table = Table(title="Native Libraries by Module")
            table.add_column("Module", style="cyan")
            table.add_column("Libraries", justify="right")
            table.add_column("Size", justify="right")
            for module, libs in report.modules.items():
                total = sum(lib.uncompressed_size for lib in libs)
                table.add_row(module, str(len(libs)), format_size(total))
            console.print(table)
        return

    if not report.libraries:
        console.print_info("No native libraries found in APK")
        return

    console.print(f"  Total .so files: {len(report.libraries)}")
    console.print(f"  [green]16 KB aligned:[/green] {report.aligned_count}")
    console.print(f"  [red]Not aligned:[/red] {report.misaligned_count}")

    misaligned = report.misaligned
    if misaligned:
        table = Table(title="Misaligned Libraries")
        table.add_column("Library", style="cyan")
        table.add_column("Path")
        table.add_column("Offset", justify="right")
        table.add_column("Remainder", justify="right", style="red")
        for lib in misaligned[:MAX_MISALIGNED_SHOWN]:
            table.add_row(
                lib.library_name,
                lib.path,
                str(lib.effective_offset),
                f"{lib.page_remainder} bytes",
            )
        console.print(table)
        if len(misaligned) > MAX_MISALIGNED_SHOWN:
            console.print(f"  ... and {len(misaligned) - MAX_MISALIGNED_SHOWN} more")

    for lib in report.libraries:
        if lib.compressed:
            console.print_debug(f"{lib.path} is compressed and cannot be mmapped")


def render_artifact_report(report: ArtifactReport) -> None:
    """Print the analysis and summary of one artifact."""
    label = report.artifact_kind.label
    console.rule(f"{label}: {report.artifact_path.name}")

    if report.failure is not None:
        console.print_error(escape(report.failure.message))
        return

    console.print_info(
        f"{label} file: {report.artifact_path} ({format_size(report.size_bytes)})"
    )

    validation = report.bundle_validation
    if validation is not None:
        if validation.status == ValidationStatus.PASSED:
            console.print_success("Bundletool validation PASSED")
            console.print_debug(validation.output)
        elif validation.status == ValidationStatus.FAILED:
            console.print_error("Bundletool validation FAILED")
            console.print(validation.output, markup=False)
        else:
            console.print_warning(
                f"Bundletool validation skipped: {escape(validation.reason or '')}"
            )

    _render_libraries(report)

    for anomaly in report.anomalies:
        console.print_warning(escape(f"Skipped {anomaly.path}: {anomaly.reason}"))

    console.print()
    if report.outcome == Outcome.NO_NATIVE_CODE and report.compatible:
        console.print_success(f"{label} has no native code to align")
    elif report.compatible:
        console.print_success(f"{label} is compatible with 16 KB page size")
    elif report.outcome == Outcome.NO_NATIVE_CODE:
        console.print_error(f"{label} is NOT ready: no native libraries found")
    else:
        console.print_error(f"{label} is NOT compatible with 16 KB page size")

    console.print("[cyan]Next steps:[/cyan]")
    for i, step in enumerate(NEXT_STEPS[(report.artifact_kind, report.compatible)], 1):
        console.print(f"  {i}. {step}")


def render_final_verdict(verdict: BatchVerdict) -> None:
    """Print the run summary."""
    console.print_section("Final Verdict")
    console.print_info(
        f"Processed: {verdict.bundle_count} AAB(s), {verdict.package_count} APK(s)"
    )

    if verdict.status == BatchStatus.ALL_COMPATIBLE:
        console.print("\n[bold green]PASSED[/bold green]\n")
        console.print_success("All artifacts are compatible with 16 KB page size")
    elif verdict.status == BatchStatus.NOT_EVALUATED:
        console.print("\n[bold red]NOT EVALUATED[/bold red]\n")
        console.print_error("No artifact could be analyzed")
    else:
        console.print("\n[bold red]FAILED[/bold red]\n")
        console.print_error("Some artifacts are NOT compatible with 16 KB page size")
        for report in verdict.reports:
            if not report.compatible:
                cause = report.failure.kind if report.failure else report.outcome.value
                console.print(f"  - {report.artifact_path} ({cause})")

    console.print_info(f"Scan complete at {datetime.now():%Y-%m-%d %H:%M:%S}")
