"""pagecheck - 16 KB page size compatibility checker for Android artifacts."""

__version__ = "2.0.0"

PAGE_SIZE_16KB = 16384
