"""CLI command for 16 KB page size compatibility checks."""

import json
from contextlib import nullcontext
from pathlib import Path

import typer

from pagecheck.cli.report import (
    render_artifact_report,
    render_build_config,
    render_final_verdict,
    render_prerequisites,
)
from pagecheck.core.analyzer import analyze_batch
from pagecheck.core.buildconfig import BuildConfigReader
from pagecheck.core.bundletool import BundletoolValidator
from pagecheck.core.discovery import require_artifacts
from pagecheck.core.environment import check_prerequisites, discover_environment
from pagecheck.exceptions import PagecheckError
from pagecheck.models.artifact import BatchStatus, BatchVerdict
from pagecheck.utils.config import JOBS_KEY, get_config_int
from pagecheck.utils.output import console

EXIT_COMPATIBLE = 0
EXIT_INCOMPATIBLE = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


def exit_code_for(verdict: BatchVerdict) -> int:
    """Map a batch verdict to the process exit code."""
    if verdict.status == BatchStatus.ALL_COMPATIBLE:
        return EXIT_COMPATIBLE
    if verdict.status == BatchStatus.NOT_EVALUATED:
        return EXIT_ERROR
    return EXIT_INCOMPATIBLE


def _default_jobs() -> int:
    return get_config_int(JOBS_KEY, 1)


def check(
    artifacts: list[Path] = typer.Argument(
        None,
        help="AAB or APK files to check (default: search build directories).",
        dir_okay=False,
    ),
    project_dir: Path = typer.Option(
        Path("."),
        "--project-dir",
        "-p",
        help="Project root for artifact discovery and build configuration.",
        file_okay=False,
    ),
    jobs: int = typer.Option(
        None,
        "--jobs",
        help="Analyze up to N artifacts in parallel.",
        min=1,
    ),
    no_bundletool: bool = typer.Option(
        False,
        "--no-bundletool",
        help="Skip bundletool validation of AABs.",
    ),
    no_build_config: bool = typer.Option(
        False,
        "--no-build-config",
        help="Skip Gradle build configuration checks.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all output except errors.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this file.",
        dir_okay=False,
    ),
) -> None:
    """Check AABs and APKs against Google Play's 16 KB page size requirement.

    APKs pass when every native library starts on a 16 KB boundary. AABs pass
    when they carry a bundle config and native libraries; Google Play then
    generates aligned APKs from them.

    Exit codes: 0 all compatible, 1 some incompatible, 2 nothing evaluated or
    invalid usage.

    Examples:
        # Auto-detect and check all build artifacts
        pagecheck check

        # Check a specific APK with verbose output
        pagecheck check -v app-release.apk

        # Write a JSON report
        pagecheck check -j -o report.json
    """
    console.configure(json_mode=json_output, verbose=verbose, quiet=quiet)

    run_config = discover_environment(
        project_dir,
        validate_bundles=not no_bundletool,
        check_build_config=not no_build_config,
        jobs=jobs or _default_jobs(),
    )
    console.print_debug(f"run config: {run_config.model_dump_json()}")

    if not (json_output or quiet):
        render_prerequisites(check_prerequisites(run_config))

    build_config = None
    if run_config.check_build_config:
        build_config = BuildConfigReader(project_dir).read()
        render_build_config(build_config)
        if build_config.issues:
            console.print_warning("Build configuration has issues")

    try:
        if artifacts:
            paths = list(artifacts)
        else:
            console.print_section("Discovering Build Artifacts")
            paths = require_artifacts(project_dir)
            console.print_info(f"Found {len(paths)} artifact(s):")
            for i, path in enumerate(paths, 1):
                console.print_info(f"  [{i}] {path}")
    except PagecheckError as e:
        console.print_error(str(e))
        console.print_info("Build your app first:")
        console.print_info("  flutter build appbundle --release  # for AAB")
        console.print_info("  flutter build apk --release        # for APK")
        raise typer.Exit(EXIT_ERROR) from None

    validator = BundletoolValidator(run_config) if run_config.validate_bundles else None

    try:
        with validator if validator is not None else nullcontext():
            spinner = (
                console.status("Analyzing artifacts...")
                if not (json_output or quiet)
                else nullcontext()
            )
            with spinner:
                verdict = analyze_batch(
                    paths,
                    jobs=run_config.jobs,
                    bundle_validator=validator,
                    build_config=build_config,
                )
    except KeyboardInterrupt:
        console.print_error("Interrupted")
        raise typer.Exit(EXIT_INTERRUPTED) from None

    for report in verdict.reports:
        render_artifact_report(report)
    render_final_verdict(verdict)

    document = json.dumps(verdict.model_dump(mode="json"), indent=2)
    if json_output:
        typer.echo(document)
    if output is not None:
        try:
            output.write_text(document + "\n", encoding="utf-8")
        except OSError as e:
            console.print_error(f"Failed to write report to {output}: {e}")
            raise typer.Exit(EXIT_ERROR) from None
        console.print_success(f"Report written to {output}")

    raise typer.Exit(exit_code_for(verdict))
