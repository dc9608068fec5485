"""Root CLI application for pagecheck."""

import typer

from pagecheck import __version__
from pagecheck.cli import check, environment

app = typer.Typer(
    name="pagecheck",
    help="Validate Android AABs and APKs for Google Play's 16 KB page size requirement.",
    no_args_is_help=True,
)

# Register commands
app.command("check")(check.check)
app.command("doctor")(environment.doctor)
app.command("build-config")(environment.build_config)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pagecheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """pagecheck - 16 KB page size compatibility checker."""
    pass


if __name__ == "__main__":
    app()
