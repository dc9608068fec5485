"""Tests for core/buildconfig.py - Gradle configuration flags."""

from pathlib import Path

import pytest

from pagecheck.core.buildconfig import BuildConfigReader
from pagecheck.models.advisory import BuildConfigFlag


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "android" / "app").mkdir(parents=True)
    return tmp_path


def _write(project: Path, relative: str, content: str) -> None:
    (project / relative).write_text(content)


class TestGradleProperties:
    def test_alignment_flag_present(self, project):
        _write(
            project,
            "android/gradle.properties",
            "org.gradle.jvmargs=-Xmx4G\n"
            "android.bundle.enableMaxPageSizeAlignmentFlag=true\n",
        )
        report = BuildConfigReader(project).read()
        assert report.has(BuildConfigFlag.MAX_PAGE_SIZE_ALIGNMENT)
        assert report.issues == []

    def test_alignment_flag_missing_is_issue(self, project):
        _write(project, "android/gradle.properties", "android.useAndroidX=true\n")
        report = BuildConfigReader(project).read()
        assert not report.has(BuildConfigFlag.MAX_PAGE_SIZE_ALIGNMENT)
        assert report.issues == [
            "Missing: android.bundle.enableMaxPageSizeAlignmentFlag=true"
        ]

    def test_alignment_flag_false_is_issue(self, project):
        _write(
            project,
            "android/gradle.properties",
            "android.bundle.enableMaxPageSizeAlignmentFlag=false\n",
        )
        assert BuildConfigReader(project).read().issues

    def test_deprecated_property_warns(self, project):
        _write(
            project,
            "android/gradle.properties",
            "android.bundle.enableMaxPageSizeAlignmentFlag=true\n"
            "android.bundle.enableUncompressedNativeLibs=false\n",
        )
        report = BuildConfigReader(project).read()
        assert report.has(BuildConfigFlag.DEPRECATED_UNCOMPRESSED_NATIVE_LIBS)
        assert report.warnings == [
            "Deprecated property: android.bundle.enableUncompressedNativeLibs"
        ]


class TestAppBuildFile:
    def test_groovy_legacy_packaging(self, project):
        _write(
            project,
            "android/app/build.gradle",
            "android {\n"
            "    packagingOptions {\n"
            "        jniLibs {\n"
            "            useLegacyPackaging false\n"
            "        }\n"
            "    }\n"
            "}\n",
        )
        report = BuildConfigReader(project).read()
        assert report.has(BuildConfigFlag.LEGACY_PACKAGING_DISABLED)

    def test_kotlin_dsl_and_flexible_page_sizes(self, project):
        _write(
            project,
            "android/app/build.gradle.kts",
            "android {\n"
            "    packaging { jniLibs.useLegacyPackaging = false }\n"
            '    externalNativeBuild { cmake { arguments += "-DANDROID_SUPPORT_FLEXIBLE_PAGE_SIZES=ON" } }\n'
            "}\n",
        )
        report = BuildConfigReader(project).read()
        assert report.flags == [
            BuildConfigFlag.LEGACY_PACKAGING_DISABLED,
            BuildConfigFlag.FLEXIBLE_PAGE_SIZES,
        ]
        assert report.files_checked == [project / "android/app/build.gradle.kts"]

    def test_unclear_legacy_packaging(self, project):
        _write(project, "android/app/build.gradle", "useLegacyPackaging = true\n")
        report = BuildConfigReader(project).read()
        assert report.has(BuildConfigFlag.LEGACY_PACKAGING_UNCLEAR)
        assert "useLegacyPackaging value unclear" in report.warnings


class TestMissingFiles:
    def test_no_build_files_skipped(self, tmp_path):
        report = BuildConfigReader(tmp_path).read()
        assert report.skipped
        assert report.flags == []
        assert report.issues == []
        assert len(report.files_missing) == 2

    def test_only_properties(self, project):
        _write(
            project,
            "android/gradle.properties",
            "android.bundle.enableMaxPageSizeAlignmentFlag=true\n",
        )
        report = BuildConfigReader(project).read()
        assert not report.skipped
        assert report.files_missing == [project / "android/app/build.gradle"]
