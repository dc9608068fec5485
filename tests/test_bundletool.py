"""Tests for core/bundletool.py - advisory bundle validation."""

from pathlib import Path

import httpx
import pytest

from pagecheck.core import bundletool as bundletool_module
from pagecheck.core.bundletool import BundletoolValidator
from pagecheck.exceptions import CollaboratorUnavailableError, ProcessError
from pagecheck.models.advisory import ValidationStatus
from pagecheck.models.environment import RunConfig
from pagecheck.utils.process import ProcessResult

JAR_BYTES = b"PK\x03\x04fake-bundletool-jar"


class FakeRunner:
    """Stand-in for run_tool that records commands."""

    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.commands: list[list[str]] = []

    def __call__(self, command, **kwargs):
        self.commands.append(command)
        return ProcessResult(
            command=command,
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
        )


def _transport(counter: list[str], status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        counter.append(str(request.url))
        return httpx.Response(status_code, content=JAR_BYTES)

    return httpx.MockTransport(handler)


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner(stdout="Bundle is valid")
    monkeypatch.setattr(bundletool_module, "run_tool", fake)
    return fake


class TestAcquire:
    def test_preinstalled_command_used(self, runner, tmp_path):
        config = RunConfig(bundletool_command=["/opt/bundletool"])
        validator = BundletoolValidator(config)

        result = validator.validate(tmp_path / "app.aab")

        assert result.status == ValidationStatus.PASSED
        assert result.output == "Bundle is valid"
        assert runner.commands == [
            ["/opt/bundletool", "validate", f"--bundle={tmp_path / 'app.aab'}"]
        ]

    def test_download_once_per_run(self, runner, tmp_path):
        requests: list[str] = []
        config = RunConfig(java="/usr/bin/java", bundletool_url="https://example.test/bt.jar")

        with BundletoolValidator(config, transport=_transport(requests)) as validator:
            validator.validate(tmp_path / "a.aab")
            validator.validate(tmp_path / "b.aab")
            jar = validator.downloaded_jar
            assert jar is not None
            assert jar.read_bytes() == JAR_BYTES

        assert requests == ["https://example.test/bt.jar"]
        assert len(runner.commands) == 2
        assert runner.commands[0][:3] == ["/usr/bin/java", "-jar", str(jar)]
        assert not jar.exists()

    def test_missing_java_skips(self, runner, tmp_path):
        validator = BundletoolValidator(RunConfig(java=None))
        result = validator.validate(tmp_path / "a.aab")
        assert result.status == ValidationStatus.SKIPPED
        assert "java" in result.reason
        assert runner.commands == []

    def test_failed_download_degrades_to_skipped(self, runner, tmp_path):
        requests: list[str] = []
        config = RunConfig(java="java", bundletool_url="https://example.test/bt.jar")
        validator = BundletoolValidator(config, transport=_transport(requests, 404))

        first = validator.validate(tmp_path / "a.aab")
        second = validator.validate(tmp_path / "b.aab")

        assert first.status == second.status == ValidationStatus.SKIPPED
        assert "download" in first.reason
        assert requests == ["https://example.test/bt.jar"]
        assert validator.downloaded_jar is None
        assert runner.commands == []
        validator.close()

    def test_rename_failure_degrades_to_skipped(self, runner, monkeypatch, tmp_path):
        created: list[Path] = []
        real_mkdtemp = bundletool_module.tempfile.mkdtemp

        def tracking_mkdtemp(*args, **kwargs):
            path = real_mkdtemp(*args, **kwargs)
            created.append(Path(path))
            return path

        def disk_full(self, target):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(bundletool_module.tempfile, "mkdtemp", tracking_mkdtemp)
        monkeypatch.setattr(Path, "replace", disk_full)
        config = RunConfig(java="java", bundletool_url="https://example.test/bt.jar")
        validator = BundletoolValidator(config, transport=_transport([]))

        result = validator.validate(tmp_path / "a.aab")

        assert result.status == ValidationStatus.SKIPPED
        assert "No space left" in result.reason
        assert runner.commands == []
        assert validator.downloaded_jar is None
        assert len(created) == 1
        assert not created[0].exists()

    def test_temp_dir_failure_degrades_to_skipped(self, runner, monkeypatch, tmp_path):
        def no_temp(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(bundletool_module.tempfile, "mkdtemp", no_temp)
        config = RunConfig(java="java", bundletool_url="https://example.test/bt.jar")
        validator = BundletoolValidator(config, transport=_transport([]))

        result = validator.validate(tmp_path / "a.aab")

        assert result.status == ValidationStatus.SKIPPED
        assert "Permission denied" in result.reason

    def test_acquire_raises_when_unavailable(self):
        validator = BundletoolValidator(RunConfig(java=None))
        with pytest.raises(CollaboratorUnavailableError):
            validator.acquire()


class TestValidate:
    def test_failure_is_reported_with_output(self, monkeypatch, tmp_path):
        fake = FakeRunner(returncode=1, stderr="[BT:1.17.2] Error: bad bundle")
        monkeypatch.setattr(bundletool_module, "run_tool", fake)
        validator = BundletoolValidator(RunConfig(bundletool_command=["bundletool"]))

        result = validator.validate(tmp_path / "a.aab")

        assert result.status == ValidationStatus.FAILED
        assert "bad bundle" in result.output

    def test_tool_crash_is_skipped(self, monkeypatch, tmp_path):
        def boom(command, **kwargs):
            raise ProcessError(command, -1, "Command not found: bundletool")

        monkeypatch.setattr(bundletool_module, "run_tool", boom)
        validator = BundletoolValidator(RunConfig(bundletool_command=["bundletool"]))

        result = validator.validate(Path("x.aab"))

        assert result.status == ValidationStatus.SKIPPED
        assert "not found" in result.reason
