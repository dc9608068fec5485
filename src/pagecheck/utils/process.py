"""Subprocess wrapper for the external tools pagecheck probes (java, flutter, bundletool)."""

import subprocess
from dataclasses import dataclass

from pagecheck.exceptions import ProcessError


@dataclass
class ProcessResult:
    """Captured result of one tool invocation."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        """Check if the command succeeded."""
        return self.returncode == 0

    @property
    def combined_output(self) -> str:
        """Get stdout and stderr joined, as a terminal would show them.

        ``java -version`` prints to stderr and bundletool reports validation
        errors on either stream, so callers read both.
        """
        parts = [self.stdout.strip(), self.stderr.strip()]
        return "\n".join(part for part in parts if part)


def run_tool(
    command: list[str],
    *,
    check: bool = True,
    timeout: float | None = None,
) -> ProcessResult:
    """Run an external tool and capture its output.

    Args:
        command: Command and arguments to run.
        check: If True, raise ProcessError on non-zero exit.
        timeout: Optional timeout in seconds.

    Returns:
        ProcessResult with both output streams.

    Raises:
        ProcessError: If the tool cannot be started, times out, or (with
            check=True) exits non-zero.
    """
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ProcessError(command, -1, f"{command[0]} timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise ProcessError(command, -1, f"Command not found: {command[0]}") from e
    except OSError as e:
        raise ProcessError(command, -1, f"Cannot start {command[0]}: {e}") from e

    result = ProcessResult(
        command=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )

    if check and not result.success:
        raise ProcessError(command, result.returncode, result.combined_output)

    return result
