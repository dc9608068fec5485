"""Tests for core/discovery.py - build artifact discovery."""

import pytest

from pagecheck.core.discovery import find_build_artifacts, require_artifacts
from pagecheck.exceptions import DiscoveryError


def _touch(root, relative):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"PK")
    return path.resolve()


class TestFindBuildArtifacts:
    def test_bundles_then_release_apks(self, tmp_path):
        apk = _touch(tmp_path, "build/app/outputs/flutter-apk/app-release.apk")
        aab = _touch(tmp_path, "build/app/outputs/bundle/release/app-release.aab")
        nested = _touch(tmp_path, "android/app/build/outputs/bundle/app.aab")

        assert find_build_artifacts(tmp_path) == sorted([aab, nested]) + [apk]

    def test_ignores_debug_apks_and_non_build_dirs(self, tmp_path):
        _touch(tmp_path, "build/app/outputs/flutter-apk/app-debug.apk")
        _touch(tmp_path, "dist/app-release.apk")
        _touch(tmp_path, "app.aab")
        assert find_build_artifacts(tmp_path) == []

    def test_missing_root(self, tmp_path):
        assert find_build_artifacts(tmp_path / "nope") == []

    def test_require_artifacts_raises(self, tmp_path):
        with pytest.raises(DiscoveryError, match="No AAB or APK"):
            require_artifacts(tmp_path)
