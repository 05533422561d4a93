"""Exceptions raised while reading a presentation package.

Only ``PackageError`` escapes ``PPTXReader.read``; the other errors are
raised inside a single slide and recovered by skipping that slide.
"""


class DeckModelError(Exception):
    """Base class for all parser errors."""


class PackageError(DeckModelError):
    """The package is unreadable or is not a presentation."""


class PartNotFoundError(DeckModelError):
    """A referenced part is absent from the package."""

    def __init__(self, part_path: str) -> None:
        super().__init__(f"Part not found: {part_path}")
        self.part_path = part_path


class CorruptPartError(DeckModelError):
    """A zip entry exists but cannot be decompressed (bad CRC, truncated data)."""

    def __init__(self, part_path: str, reason: str) -> None:
        super().__init__(f"Corrupt entry {part_path}: {reason}")
        self.part_path = part_path


class MalformedPartError(DeckModelError):
    """A part exists but its XML cannot be parsed."""

    def __init__(self, part_path: str, reason: str) -> None:
        super().__init__(f"Malformed part {part_path}: {reason}")
        self.part_path = part_path


class MalformedDocumentError(DeckModelError):
    """The document structure is invalid, e.g. groups nested too deeply."""
