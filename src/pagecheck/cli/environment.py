"""CLI commands for inspecting the local toolchain and project configuration."""

import json
from pathlib import Path

import typer

from pagecheck.cli.report import render_build_config, render_prerequisites
from pagecheck.core.buildconfig import BuildConfigReader
from pagecheck.core.environment import check_prerequisites, discover_environment
from pagecheck.utils.output import console


def doctor(
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Show which tools (Java, Android SDK, zipalign, bundletool) are available."""
    console.configure(json_mode=json_output)

    run_config = discover_environment()
    statuses = check_prerequisites(run_config)

    if json_output:
        output = [status.model_dump(mode="json") for status in statuses]
        typer.echo(json.dumps(output, indent=2))
        return

    render_prerequisites(statuses)

    if any(status.required and not status.found for status in statuses):
        raise typer.Exit(2)


def build_config(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Flutter/Android project root.",
        exists=True,
        file_okay=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Check Gradle files for 16 KB page size settings (advisory)."""
    console.configure(json_mode=json_output)

    report = BuildConfigReader(project_dir).read()

    if json_output:
        typer.echo(json.dumps(report.model_dump(mode="json"), indent=2))
        return

    render_build_config(report)
    if report.issues:
        raise typer.Exit(1)
