"""Read-only access to the entries of a zip package."""

import logging
import zipfile
import zlib
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from deckmodel.parser.errors import CorruptPartError, PackageError

logger = logging.getLogger(__name__)


class PackageArchive:
    """Lists and extracts entries of an OOXML package.

    Entry paths are package-relative POSIX paths without a leading slash
    (e.g. ``ppt/slides/slide1.xml``). Use as a context manager so the
    underlying zip file is closed when the parse finishes.
    """

    def __init__(self, source: Union[bytes, str, Path, BinaryIO]) -> None:
        """Open the package.

        Args:
            source: Raw package bytes, a path, or a binary file object.

        Raises:
            PackageError: If the source is not a readable zip archive.
        """
        if isinstance(source, (bytes, bytearray)):
            source = BytesIO(source)
        try:
            self._zip = zipfile.ZipFile(source, "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as e:
            raise PackageError(f"Failed to open package: {e}") from e

        self._entries = {
            info.filename.lstrip("/"): info.filename
            for info in self._zip.infolist()
            if not info.is_dir()
        }
        logger.debug(f"Opened package with {len(self._entries)} entries")

    def __enter__(self) -> "PackageArchive":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying zip file."""
        self._zip.close()

    def list_entries(self) -> list[str]:
        """All file entries in archive order."""
        return list(self._entries)

    def exists(self, path: str) -> bool:
        """Check whether an entry exists."""
        return path.lstrip("/") in self._entries

    def read_binary(self, path: str) -> Optional[bytes]:
        """Read an entry's bytes, or None if the entry is absent.

        Raises:
            CorruptPartError: If the entry exists but cannot be decompressed.
        """
        name = self._entries.get(path.lstrip("/"))
        if name is None:
            return None
        try:
            return self._zip.read(name)
        except (
            zipfile.BadZipFile,
            zipfile.LargeZipFile,
            zlib.error,
            OSError,
            EOFError,
            RuntimeError,
        ) as e:
            raise CorruptPartError(path, str(e)) from e

    def read_text(self, path: str) -> Optional[str]:
        """Read an entry as UTF-8 text, or None if the entry is absent."""
        data = self.read_binary(path)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace")
