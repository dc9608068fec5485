"""Shared fixtures: real zip archives with controlled native library offsets."""

import struct
from collections.abc import Callable
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile, ZipInfo

import pytest

from pagecheck.models.artifact import ArchiveEntry
from pagecheck.utils.config import reload_config

PAGE = 16384

# Extra field id used by Android's zipalign for alignment padding
ALIGNMENT_EXTRA_ID = 0xD935

ArchiveLayout = list[tuple[str, bytes, int | None]]


def _padding_extra(header_offset: int, name: str, remainder: int) -> bytes:
    """Extra field that puts the payload at ``remainder`` past a 16 KB boundary."""
    base = header_offset + 30 + len(name.encode("utf-8"))
    pad = (remainder - base) % PAGE
    if pad < 4:
        pad += PAGE
    return struct.pack("<HH", ALIGNMENT_EXTRA_ID, pad - 4) + b"\x00" * (pad - 4)


def write_archive(path: Path, entries: ArchiveLayout) -> Path:
    """Write a zip file.

    Each entry is ``(name, data, remainder)``. When ``remainder`` is not None
    the entry is stored uncompressed and padded so that its payload starts
    ``remainder`` bytes past a 16 KB boundary; otherwise it is deflated.
    """
    with ZipFile(path, "w") as zf:
        for name, data, remainder in entries:
            info = ZipInfo(name, date_time=(2024, 1, 1, 0, 0, 0))
            if remainder is None:
                info.compress_type = ZIP_DEFLATED
            else:
                info.compress_type = ZIP_STORED
                info.extra = _padding_extra(zf.fp.tell(), name, remainder)
            zf.writestr(info, data)
    return path


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[[str, ArchiveLayout], Path]:
    """Factory writing an archive named ``name`` into tmp_path."""

    def _make(name: str, entries: ArchiveLayout) -> Path:
        return write_archive(tmp_path / name, entries)

    return _make


@pytest.fixture
def aligned_apk(make_archive) -> Path:
    """APK whose two native libraries are 16 KB aligned."""
    return make_archive(
        "app-release.apk",
        [
            ("AndroidManifest.xml", b"<manifest/>", None),
            ("classes.dex", b"dex\n035" * 10, None),
            ("lib/arm64-v8a/libapp.so", b"\x7fELF" + b"\x01" * 100, 0),
            ("lib/armeabi-v7a/libapp.so", b"\x7fELF" + b"\x02" * 100, 0),
        ],
    )


@pytest.fixture
def misaligned_apk(make_archive) -> Path:
    """APK with one library 4 bytes past a 16 KB boundary."""
    return make_archive(
        "misaligned-release.apk",
        [
            ("AndroidManifest.xml", b"<manifest/>", None),
            ("lib/arm64-v8a/libflutter.so", b"\x7fELF" + b"\x03" * 100, 0),
            ("lib/arm64-v8a/libapp.so", b"\x7fELF" + b"\x04" * 100, 4),
        ],
    )


@pytest.fixture
def bundle_aab(make_archive) -> Path:
    """AAB with a bundle config and two modules carrying native libraries."""
    return make_archive(
        "app-release.aab",
        [
            ("BundleConfig.pb", b"\x0a\x02\x08\x01", None),
            ("base/manifest/AndroidManifest.xml", b"\x00", None),
            ("base/lib/arm64-v8a/libapp.so", b"\x7fELF" + b"\x05" * 64, 7),
            ("base/lib/arm64-v8a/libflutter.so", b"\x7fELF" + b"\x06" * 64, None),
            ("feature/lib/arm64-v8a/libapp.so", b"\x7fELF" + b"\x07" * 64, 0),
        ],
    )


@pytest.fixture
def invalid_utf8_name_apk(make_archive) -> Path:
    """APK whose UTF-8 flagged entry name holds bytes that are not UTF-8."""
    name = "lib/arm64-v8a/libé.so"
    path = make_archive(
        "broken-release.apk",
        [
            ("AndroidManifest.xml", b"<manifest/>", None),
            (name, b"\x7fELF" + b"\x08" * 32, 0),
        ],
    )
    # zipfile sets flag bit 11 for non-ASCII names; same length keeps offsets valid
    raw = path.read_bytes().replace("é".encode("utf-8"), b"\xff\xfe")
    path.write_bytes(raw)
    return path


def make_entry(
    name: str = "lib/arm64-v8a/libapp.so",
    header_offset: int = 0,
    extra_field_length: int | None = 0,
    filename_length: int | None = None,
    compress_type: int = 0,
    local_header_error: str | None = None,
) -> ArchiveEntry:
    """Build an ArchiveEntry without a backing archive."""
    if filename_length is None and local_header_error is None:
        filename_length = len(name.encode("utf-8"))
    return ArchiveEntry(
        name=name,
        header_offset=header_offset,
        compressed_size=128,
        uncompressed_size=128,
        compress_type=compress_type,
        filename_length=filename_length,
        extra_field_length=extra_field_length,
        local_header_error=local_header_error,
    )


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user config, SDK and bundletool settings out of tests."""
    monkeypatch.setattr("pagecheck.utils.config.CONFIG_FILE", tmp_path / "config.json")
    for var in ("ANDROID_HOME", "ANDROID_SDK_ROOT", "BUNDLETOOL_JAR"):
        monkeypatch.delenv(var, raising=False)
    reload_config()
    yield
    reload_config()
