"""Archive entry scanning: central directory plus each entry's local header."""

import struct
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO
from zipfile import BadZipFile, ZipFile, ZipInfo

from pagecheck.exceptions import ArchiveUnreadableError, ArtifactNotFoundError
from pagecheck.models.artifact import ArchiveEntry

# ZIP local file header magic (APKs and AABs are ZIP files)
ZIP_FILE_HEADER = b"PK\x03\x04"

# signature, version, flags, method, time, date, crc, csize, usize, name len, extra len
LOCAL_HEADER = struct.Struct("<4s2B4HL2L2H")


class ArchiveScanner:
    """Enumerate the entries of a zip-based container.

    Each call to :meth:`entries` (or iteration over the scanner) opens a fresh
    read-only handle, so a scanner can be iterated any number of times. The
    handle is closed when iteration finishes, fails, or is abandoned.
    """

    def __init__(self, path: Path):
        self.path = path

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return self.entries()

    def ensure_readable(self) -> None:
        """Check that the path resolves to a regular file.

        Raises:
            ArtifactNotFoundError: If the path is missing or not a file.
        """
        if not self.path.exists():
            raise ArtifactNotFoundError(self.path, "file not found")

        if not self.path.is_file():
            raise ArtifactNotFoundError(self.path, "not a file")

    def _open(self) -> BinaryIO:
        self.ensure_readable()
        try:
            return self.path.open("rb")
        except OSError as e:
            raise ArtifactNotFoundError(self.path, f"cannot open file: {e}") from e

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield entries in the container's native directory order.

        Raises:
            ArtifactNotFoundError: If the path is not a readable file.
            ArchiveUnreadableError: If the file is not a valid zip container.
        """
        handle = self._open()
        with handle:
            try:
                archive = ZipFile(handle, "r")
            except (BadZipFile, EOFError) as e:
                raise ArchiveUnreadableError(
                    self.path, f"not a valid zip archive: {e}"
                ) from e
            except ValueError as e:
                # e.g. an entry flagged UTF-8 whose name is not valid UTF-8
                raise ArchiveUnreadableError(
                    self.path, f"corrupt central directory: {e}"
                ) from e
            except OSError as e:
                raise ArchiveUnreadableError(self.path, f"failed to read: {e}") from e

            with archive:
                try:
                    infolist = archive.infolist()
                    for info in infolist:
                        yield self._read_entry(handle, info)
                except OSError as e:
                    raise ArchiveUnreadableError(
                        self.path, f"failed to read: {e}"
                    ) from e
                except ValueError as e:
                    raise ArchiveUnreadableError(
                        self.path, f"corrupt entry metadata: {e}"
                    ) from e

    def names(self) -> list[str]:
        """Return every entry name in directory order."""
        return [entry.name for entry in self.entries()]

    def _read_entry(self, handle: BinaryIO, info: ZipInfo) -> ArchiveEntry:
        """Combine central directory data with the entry's local header lengths."""
        filename_length: int | None = None
        extra_field_length: int | None = None
        error: str | None = None

        handle.seek(info.header_offset)
        raw = handle.read(LOCAL_HEADER.size)
        if len(raw) < LOCAL_HEADER.size:
            error = f"local header truncated at offset {info.header_offset}"
        else:
            fields = LOCAL_HEADER.unpack(raw)
            if fields[0] != ZIP_FILE_HEADER:
                error = (
                    f"bad local header signature at offset {info.header_offset}: "
                    f"{fields[0]!r}"
                )
            else:
                filename_length, extra_field_length = fields[-2], fields[-1]

        return ArchiveEntry(
            name=info.filename,
            header_offset=info.header_offset,
            compressed_size=info.compress_size,
            uncompressed_size=info.file_size,
            compress_type=info.compress_type,
            filename_length=filename_length,
            extra_field_length=extra_field_length,
            local_header_error=error,
        )
