"""Rich console helpers for terminal output."""

from typing import Any

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.status import Status


class Console:
    """Wrapper around rich.Console with convenience methods.

    Verbose mode enables debug lines, quiet mode keeps only errors, and JSON
    mode suppresses everything so stdout stays machine-readable.
    """

    def __init__(self) -> None:
        self._console = RichConsole()
        self._json_mode = False
        self._verbose = False
        self._quiet = False

    def configure(
        self, *, json_mode: bool = False, verbose: bool = False, quiet: bool = False
    ) -> None:
        """Set all output modes at once."""
        self._json_mode = json_mode
        self._verbose = verbose
        self._quiet = quiet

    @property
    def verbose(self) -> bool:
        return self._verbose and not self._quiet

    @property
    def _silent(self) -> bool:
        return self._json_mode or self._quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console (suppressed in JSON and quiet mode)."""
        if not self._silent:
            self._console.print(*args, **kwargs)

    def print_success(self, message: str) -> None:
        """Print a success message in green."""
        if not self._silent:
            self._console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message in red (shown in quiet mode)."""
        if not self._json_mode:
            self._console.print(f"[red]✗[/red] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message in blue."""
        if not self._silent:
            self._console.print(f"[blue]ℹ[/blue] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        if not self._silent:
            self._console.print(f"[yellow]⚠[/yellow] {message}")

    def print_debug(self, message: str) -> None:
        """Print a dimmed debug message when verbose.

        The message is printed literally; tool output may contain brackets.
        """
        if self.verbose and not self._json_mode:
            self._console.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    def print_section(self, title: str, subtitle: str | None = None) -> None:
        """Print a section heading."""
        if self._silent:
            return
        self._console.print()
        self._console.print(f"[blue]▶[/blue] [bold]{title}[/bold]")
        if subtitle:
            self._console.print(f"  [dim]{subtitle}[/dim]")

    def rule(self, title: str = "") -> None:
        """Print a horizontal rule."""
        if not self._silent:
            self._console.rule(title, style="cyan")

    def status(self, message: str) -> Status:
        """Create a status spinner context manager."""
        return self._console.status(message)


# Global console instance
console = Console()
