"""Typed exception hierarchy for pagecheck."""

from pathlib import Path


class PagecheckError(Exception):
    """Base exception for all pagecheck errors."""

    pass


class ToolNotFoundError(PagecheckError):
    """Raised when a required external tool is not installed."""

    def __init__(self, tool: str, install_hint: str | None = None):
        self.tool = tool
        self.install_hint = install_hint
        message = f"Required tool not found: {tool}"
        if install_hint:
            message += f"\nInstall: {install_hint}"
        super().__init__(message)


class ProcessError(PagecheckError):
    """Raised when a subprocess command fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        cmd_str = " ".join(command)
        super().__init__(f"Command failed (exit {returncode}): {cmd_str}\n{stderr}")


class ArtifactError(PagecheckError):
    """Base for errors that are fatal to a single artifact, not to a batch."""

    kind: str = "artifact_error"

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ArtifactNotFoundError(ArtifactError):
    """Raised when an artifact path does not resolve to a readable file."""

    kind = "artifact_not_found"


class ArchiveUnreadableError(ArtifactError):
    """Raised when a file is not a valid zip container or is truncated."""

    kind = "archive_unreadable"


class OffsetComputationError(PagecheckError):
    """Raised when an entry's raw metadata is self-inconsistent."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot compute payload offset of {name}: {reason}")


class CollaboratorUnavailableError(PagecheckError):
    """Raised when an advisory collaborator (bundletool, build files) is missing."""

    def __init__(self, collaborator: str, reason: str):
        self.collaborator = collaborator
        self.reason = reason
        super().__init__(f"{collaborator} unavailable: {reason}")


class DiscoveryError(PagecheckError):
    """Raised when no analyzable artifacts can be found."""

    pass
