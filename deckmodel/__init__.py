"""deckmodel - normalized, renderer-agnostic models of PowerPoint decks.

Usage:
    import deckmodel

    with open("deck.pptx", "rb") as f:
        document = deckmodel.parse(f.read(), name="Quarterly Review")

    for slide in document.slides:
        for obj in slide.iter_objects():
            print(obj.type, obj.geometry)

    pptx_bytes = deckmodel.serialize(document)
"""

from typing import Optional

from deckmodel.dsl.schema import (
    DocumentMetadata,
    GroupObject,
    ImageObject,
    ParseReport,
    PresentationDocument,
    ShapeObject,
    Slide,
    TextObject,
    VisualObject,
)
from deckmodel.parser.errors import DeckModelError, PackageError
from deckmodel.parser.pptx_reader import PPTXReader
from deckmodel.renderer.pptx_writer import PPTXWriter

__version__ = "0.3.0"


def parse(raw: bytes, name: Optional[str] = None) -> PresentationDocument:
    """Parse PPTX bytes into a PresentationDocument.

    Args:
        raw: The package bytes.
        name: Display name for the document.

    Raises:
        PackageError: If the bytes are not a readable presentation.
    """
    return PPTXReader().read(raw, name=name)


def serialize(document: PresentationDocument) -> bytes:
    """Write a PresentationDocument as PPTX bytes."""
    return PPTXWriter().write(document)


__all__ = [
    "DeckModelError",
    "DocumentMetadata",
    "GroupObject",
    "ImageObject",
    "PackageError",
    "ParseReport",
    "PresentationDocument",
    "ShapeObject",
    "Slide",
    "TextObject",
    "VisualObject",
    "parse",
    "serialize",
]
