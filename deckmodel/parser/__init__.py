"""PPTX Parser module - reads a PowerPoint package into a PresentationDocument.

This module walks the package parts directly with lxml and produces:
- Slides in presentation order, with name, background and speaker notes
- Text, image, shape and group objects in absolute pixel geometry
- Transforms composed through arbitrarily nested groups
- Rich text with paragraphs, bullets and run formatting
- Embedded media as data URIs with crop rectangles
- Theme colors and fonts, core document properties
"""

from deckmodel.parser.archive import PackageArchive
from deckmodel.parser.context import ParseContext, sequential_ids, uuid_ids
from deckmodel.parser.errors import (
    CorruptPartError,
    DeckModelError,
    MalformedDocumentError,
    MalformedPartError,
    PackageError,
    PartNotFoundError,
)
from deckmodel.parser.pptx_reader import PPTXReader
from deckmodel.parser.shape_extractor import NodeKind, ShapeExtractor, classify
from deckmodel.parser.slide_reader import SlideReader
from deckmodel.parser.style_extractor import StyleExtractor
from deckmodel.parser.text_extractor import TextExtractor
from deckmodel.parser.theme_parser import ThemeParser
from deckmodel.parser.transform_parser import TransformParser

__all__ = [
    "CorruptPartError",
    "DeckModelError",
    "MalformedDocumentError",
    "MalformedPartError",
    "NodeKind",
    "PackageArchive",
    "PackageError",
    "ParseContext",
    "PartNotFoundError",
    "PPTXReader",
    "ShapeExtractor",
    "SlideReader",
    "StyleExtractor",
    "TextExtractor",
    "ThemeParser",
    "TransformParser",
    "classify",
    "sequential_ids",
    "uuid_ids",
]
