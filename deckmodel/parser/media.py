"""Load embedded media referenced from <a:blip r:embed="...">."""

import base64
import hashlib
import logging
import posixpath
from dataclasses import dataclass
from typing import Optional

from deckmodel.parser.context import ParseContext
from deckmodel.parser.errors import CorruptPartError

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "tif": "image/tiff",
    "tiff": "image/tiff",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class MediaPayload:
    """Resolved media bytes."""

    target: str
    mime_type: str
    data: bytes

    @property
    def digest(self) -> str:
        """Content address of the bytes."""
        return hashlib.sha256(self.data).hexdigest()

    @property
    def data_uri(self) -> str:
        """The bytes as a base64 data URI."""
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


def guess_mime_type(path: str) -> str:
    """MIME type from the file extension."""
    extension = posixpath.splitext(path)[1].lstrip(".").lower()
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)


def load_media(
    context: ParseContext,
    part_path: str,
    rel_id: Optional[str],
) -> tuple[Optional[str], Optional[MediaPayload]]:
    """Resolve a relationship ID of a part to media bytes.

    Args:
        context: The current parse context.
        part_path: Part owning the relationship (e.g. the slide).
        rel_id: Embed relationship ID.

    Returns:
        (target, payload). The target is None when the ID does not resolve;
        the payload is None when the ID does not resolve or the media part is
        absent or corrupt. All three cases are counted as missing media.
    """
    target = context.relationships(part_path).resolve(rel_id)
    if target is None:
        logger.warning(f"Unresolved media relationship {rel_id!r} in {part_path}")
        context.diagnostics.missing_media += 1
        return None, None

    try:
        data = context.archive.read_binary(target)
    except CorruptPartError as e:
        logger.warning(f"Media part referenced by {part_path} is unreadable: {e}")
        context.diagnostics.missing_media += 1
        return target, None

    if data is None:
        logger.warning(f"Media part {target} referenced by {part_path} is missing")
        context.diagnostics.missing_media += 1
        return target, None

    return target, MediaPayload(target=target, mime_type=guess_mime_type(target), data=data)
