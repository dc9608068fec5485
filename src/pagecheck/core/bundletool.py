"""Advisory AAB validation with Google's bundletool."""

import shutil
import tempfile
import threading
from pathlib import Path
from types import TracebackType

import httpx

from pagecheck.exceptions import CollaboratorUnavailableError, ProcessError
from pagecheck.models.advisory import BundleValidation, ValidationStatus
from pagecheck.models.environment import RunConfig
from pagecheck.utils.process import run_tool

BUNDLETOOL_VERSION = "1.17.2"
BUNDLETOOL_URL = (
    "https://github.com/google/bundletool/releases/download/"
    f"{BUNDLETOOL_VERSION}/bundletool-all-{BUNDLETOOL_VERSION}.jar"
)


class BundletoolValidator:
    """Run ``bundletool validate`` on bundles, downloading bundletool at most once.

    The jar is fetched lazily on the first bundle and reused for the rest of
    the run. Any failure to obtain bundletool turns every validation of the
    run into a ``skipped`` result instead of an error.
    """

    DOWNLOAD_TIMEOUT = 120.0
    VALIDATE_TIMEOUT = 300.0

    def __init__(
        self,
        run_config: RunConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the validator.

        Args:
            run_config: Resolved run configuration (java, bundletool command, URL).
            transport: Optional httpx transport, used by tests.
        """
        self.run_config = run_config
        self.transport = transport
        self._lock = threading.Lock()
        self._command: list[str] | None = None
        self._unavailable: str | None = None
        self._temp_dir: Path | None = None

    def __enter__(self) -> "BundletoolValidator":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def downloaded_jar(self) -> Path | None:
        """Path of the downloaded jar, if one was fetched."""
        if self._temp_dir is None:
            return None
        jar = self._temp_dir / "bundletool.jar"
        return jar if jar.is_file() else None

    def close(self) -> None:
        """Delete any downloaded jar."""
        if self._temp_dir is not None:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

    def _download(self, url: str) -> Path:
        """Download bundletool into a private temp directory.

        The jar only appears under its final name once fully written.

        Raises:
            CollaboratorUnavailableError: If the download fails.
        """
        try:
            self._temp_dir = Path(tempfile.mkdtemp(prefix="pagecheck-"))
            target = self._temp_dir / "bundletool.jar"
            partial = self._temp_dir / "bundletool.jar.part"
            with httpx.Client(
                follow_redirects=True,
                timeout=self.DOWNLOAD_TIMEOUT,
                transport=self.transport,
            ) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with partial.open("wb") as fh:
                        for chunk in response.iter_bytes():
                            fh.write(chunk)
            partial.replace(target)
        except (httpx.HTTPError, OSError) as e:
            self.close()
            raise CollaboratorUnavailableError(
                "bundletool", f"download from {url} failed: {e}"
            ) from e

        return target

    def acquire(self) -> list[str]:
        """Return the bundletool command, downloading the jar on first use.

        Raises:
            CollaboratorUnavailableError: If java is missing or the download failed,
                now or earlier in this run.
        """
        with self._lock:
            if self._command is not None:
                return self._command
            if self._unavailable is not None:
                raise CollaboratorUnavailableError("bundletool", self._unavailable)

            try:
                self._command = self._resolve()
            except CollaboratorUnavailableError as e:
                self._unavailable = e.reason
                raise
            return self._command

    def _resolve(self) -> list[str]:
        if self.run_config.bundletool_command:
            return list(self.run_config.bundletool_command)

        if self.run_config.java is None:
            raise CollaboratorUnavailableError("bundletool", "java not found on PATH")

        url = self.run_config.bundletool_url or BUNDLETOOL_URL
        jar = self._download(url)
        return [self.run_config.java, "-jar", str(jar)]

    def validate(self, bundle_path: Path) -> BundleValidation:
        """Validate one AAB. Never raises; unavailability yields ``skipped``."""
        try:
            command = self.acquire()
        except CollaboratorUnavailableError as e:
            return BundleValidation(status=ValidationStatus.SKIPPED, reason=e.reason)

        cmd = command + ["validate", f"--bundle={bundle_path}"]
        try:
            result = run_tool(cmd, check=False, timeout=self.VALIDATE_TIMEOUT)
        except ProcessError as e:
            return BundleValidation(status=ValidationStatus.SKIPPED, reason=e.stderr)

        status = ValidationStatus.PASSED if result.success else ValidationStatus.FAILED
        return BundleValidation(status=status, output=result.combined_output)
