"""Assemble one slide part into a Slide."""

import logging
from typing import Optional

from deckmodel.dsl.schema import Slide, SlideSize
from deckmodel.parser import xml_tree
from deckmodel.parser.context import ParseContext
from deckmodel.parser.errors import CorruptPartError, MalformedPartError
from deckmodel.parser.relationships import REL_NOTES_SLIDE
from deckmodel.parser.shape_extractor import ShapeExtractor
from deckmodel.parser.xml_tree import Element

logger = logging.getLogger(__name__)

NOTES_PLACEHOLDER_TYPE = "body"


class SlideReader:
    """Reads slide parts of one package."""

    def __init__(self, context: ParseContext) -> None:
        """Initialize the slide reader.

        Args:
            context: The current parse context.
        """
        self.context = context

    def read(self, part_path: str, slide_number: int, slide_size: SlideSize) -> Slide:
        """Read a single slide.

        Args:
            part_path: Package path of the slide part.
            slide_number: 1-based position in the presentation's slide list.
            slide_size: Presentation slide size, copied onto the slide.

        Returns:
            Slide with objects in document order.

        Raises:
            PartNotFoundError: If the slide part is absent.
            CorruptPartError: If the slide part or its .rels entry cannot be decompressed.
            MalformedPartError: If the slide XML or its relationships cannot be parsed.
            MalformedDocumentError: If groups nest deeper than allowed.
        """
        root = self.context.read_part(part_path)
        self.context.relationships(part_path)
        c_sld = xml_tree.child(root, "p:cSld")

        extractor = ShapeExtractor(self.context, part_path)
        objects = extractor.extract_shapes(xml_tree.child(c_sld, "p:spTree"))

        return Slide(
            id=self.context.new_id("slide"),
            slide_number=slide_number,
            name=xml_tree.attr(c_sld, "name") or f"Slide {slide_number}",
            width=slide_size.width,
            height=slide_size.height,
            objects=objects,
            background=extractor.style_extractor.extract_background(root, self.context, part_path),
            notes=self._extract_notes(part_path, extractor),
        )

    def _extract_notes(self, part_path: str, extractor: ShapeExtractor) -> Optional[str]:
        """Speaker notes from the body placeholder of the linked notes slide."""
        notes_path = self.context.relationships(part_path).resolve(
            self._notes_rel_id(part_path)
        )
        if notes_path is None:
            return None

        try:
            notes_root = self.context.read_optional_part(notes_path)
        except (CorruptPartError, MalformedPartError) as e:
            logger.warning(f"Ignoring unreadable notes for {part_path}: {e}")
            return None
        if notes_root is None:
            return None

        body = self._find_body_placeholder(notes_root)
        if body is None:
            return None

        paragraphs = extractor.text_extractor.extract_paragraphs(xml_tree.child(body, "p:txBody"))
        return extractor.text_extractor.flatten(paragraphs)

    def _notes_rel_id(self, part_path: str) -> Optional[str]:
        rel = self.context.relationships(part_path).first_of_type(REL_NOTES_SLIDE)
        return rel.id if rel is not None else None

    def _find_body_placeholder(self, notes_root: Element) -> Optional[Element]:
        for sp in xml_tree.find_all(notes_root, "p:sp"):
            ph = xml_tree.path(sp, "p:nvSpPr", "p:nvPr", "p:ph")
            if xml_tree.attr(ph, "type") == NOTES_PLACEHOLDER_TYPE:
                return sp
        return None
