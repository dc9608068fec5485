"""Payload offset computation for zip entries."""

from pagecheck import PAGE_SIZE_16KB
from pagecheck.exceptions import OffsetComputationError
from pagecheck.models.artifact import ArchiveEntry

# Fixed part of a local file header: signature, version, flags, method,
# time, date, crc, compressed size, uncompressed size, name len, extra len.
LOCAL_HEADER_FIXED_SIZE = 30


def local_header_length(filename_length: int, extra_field_length: int) -> int:
    """Length of a local file header including its variable-length fields."""
    return LOCAL_HEADER_FIXED_SIZE + filename_length + extra_field_length


def validate_entry(entry: ArchiveEntry) -> None:
    """Check that an entry's raw metadata is consistent enough to locate its payload.

    Raises:
        OffsetComputationError: If the header offset or local header lengths
            are missing or impossible.
    """
    if entry.local_header_error:
        raise OffsetComputationError(entry.name, entry.local_header_error)

    if entry.header_offset < 0:
        raise OffsetComputationError(
            entry.name, f"negative header offset {entry.header_offset}"
        )

    if entry.filename_length is None or entry.extra_field_length is None:
        raise OffsetComputationError(entry.name, "local header lengths unknown")

    if entry.filename_length < 0 or entry.extra_field_length < 0:
        raise OffsetComputationError(
            entry.name,
            f"negative header field length (name={entry.filename_length}, "
            f"extra={entry.extra_field_length})",
        )

    if entry.filename_length == 0:
        raise OffsetComputationError(entry.name, "local header has an empty file name")


def effective_offset(entry: ArchiveEntry) -> int:
    """Absolute byte offset at which an entry's payload begins.

    The entry must have passed :func:`validate_entry`.
    """
    return entry.header_offset + local_header_length(
        entry.filename_length or 0, entry.extra_field_length or 0
    )


def page_remainder(offset: int, page_size: int = PAGE_SIZE_16KB) -> int:
    """Distance of ``offset`` past the previous page boundary."""
    return offset % page_size
