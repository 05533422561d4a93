"""High-level PPTX reading and parsing."""

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from deckmodel.config import clamp_group_depth, get_settings
from deckmodel.dsl.schema import (
    DocumentMetadata,
    PresentationDocument,
    Slide,
    SlideSize,
)
from deckmodel.engine.units import emu_to_px
from deckmodel.parser import xml_tree
from deckmodel.parser.archive import PackageArchive
from deckmodel.parser.context import IdFactory, ParseContext, uuid_ids
from deckmodel.parser.errors import (
    CorruptPartError,
    MalformedDocumentError,
    MalformedPartError,
    PackageError,
    PartNotFoundError,
)
from deckmodel.parser.properties_parser import PropertiesParser
from deckmodel.parser.relationships import REL_OFFICE_DOCUMENT
from deckmodel.parser.slide_reader import SlideReader
from deckmodel.parser.theme_parser import ThemeParser
from deckmodel.parser.xml_tree import Element

logger = logging.getLogger(__name__)

DEFAULT_PRESENTATION_PART = "ppt/presentation.xml"

# 10in x 7.5in, the PowerPoint 4:3 default
DEFAULT_SLIDE_WIDTH_EMU = 9144000
DEFAULT_SLIDE_HEIGHT_EMU = 6858000


class PPTXReader:
    """Reads PPTX packages into PresentationDocument models."""

    def __init__(
        self,
        max_depth: Optional[int] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        """Initialize the PPTX reader.

        Args:
            max_depth: Maximum group nesting; defaults to the configured value.
                Clamped to the same bounds as the setting.
            id_factory: Callable producing object IDs from a kind prefix.
        """
        settings = get_settings()
        self.max_depth = clamp_group_depth(
            max_depth if max_depth is not None else settings.max_group_depth
        )
        self.id_factory = id_factory or uuid_ids
        self.default_name = settings.default_document_name
        self.default_author = settings.default_author
        self.theme_parser = ThemeParser()
        self.properties_parser = PropertiesParser()

    def read(
        self,
        source: Union[bytes, str, Path, BinaryIO],
        name: Optional[str] = None,
    ) -> PresentationDocument:
        """Read a PPTX package.

        Args:
            source: Raw package bytes, a path, or a binary file object.
            name: Display name; falls back to the core title, then the default.

        Returns:
            PresentationDocument with every slide that could be read.

        Raises:
            PackageError: If the package cannot be opened, or its presentation part
                or the relationships leading to it cannot be read.
        """
        with PackageArchive(source) as archive:
            context = ParseContext(
                archive=archive,
                id_factory=self.id_factory,
                max_depth=self.max_depth,
            )

            try:
                main_part = self._find_main_part(context)
                root = context.read_part(main_part)
                context.relationships(main_part)
            except (CorruptPartError, MalformedPartError, PartNotFoundError) as e:
                raise PackageError(f"Not a readable presentation: {e}") from e

            slide_size = self._extract_slide_size(root, context)

            theme = self.theme_parser.extract_theme(context, main_part)
            if theme is not None:
                context.theme_colors = theme.colors

            slides = self._extract_slides(context, root, main_part, slide_size)
            properties = self.properties_parser.extract(context)

        properties.setdefault("author", self.default_author)
        metadata = DocumentMetadata(
            **properties,
            slide_count=len(slides),
            slide_size=slide_size,
            theme=theme,
        )

        report = context.diagnostics.to_report()
        if not report.is_clean:
            logger.info(
                f"Parsed {len(slides)} slides with {len(report.skipped_slides)} skipped, "
                f"{report.missing_media} missing media, {report.malformed_values} malformed values, "
                f"{report.unsupported_nodes} unsupported nodes"
            )

        return PresentationDocument(
            id=context.new_id("presentation"),
            name=name or metadata.title or self.default_name,
            slides=slides,
            metadata=metadata,
            report=report,
        )

    def _find_main_part(self, context: ParseContext) -> str:
        """Locate the presentation part through the package relationships."""
        rel = context.relationships("").first_of_type(REL_OFFICE_DOCUMENT)
        if rel is not None and not rel.external:
            return rel.target
        logger.debug(f"No officeDocument relationship, trying {DEFAULT_PRESENTATION_PART}")
        return DEFAULT_PRESENTATION_PART

    def _extract_slide_size(self, root: Element, context: ParseContext) -> SlideSize:
        """Slide size from <p:sldSz cx cy type>, defaulting to 4:3."""
        sld_sz = xml_tree.child(root, "p:sldSz")
        diagnostics = context.diagnostics
        width = xml_tree.int_attr(sld_sz, "cx", DEFAULT_SLIDE_WIDTH_EMU, diagnostics)
        height = xml_tree.int_attr(sld_sz, "cy", DEFAULT_SLIDE_HEIGHT_EMU, diagnostics)
        return SlideSize(
            width=emu_to_px(max(0, width)),
            height=emu_to_px(max(0, height)),
            type=xml_tree.attr(sld_sz, "type"),
        )

    def _extract_slides(
        self,
        context: ParseContext,
        root: Element,
        main_part: str,
        slide_size: SlideSize,
    ) -> list[Slide]:
        """Read slides in <p:sldIdLst> order, skipping the ones that fail."""
        relationships = context.relationships(main_part)
        slide_reader = SlideReader(context)
        slides: list[Slide] = []

        slide_ids = xml_tree.children(xml_tree.child(root, "p:sldIdLst"), "p:sldId")
        for slide_number, sld_id in enumerate(slide_ids, start=1):
            rel_id = xml_tree.attr(sld_id, "r:id")
            part_path = relationships.resolve(rel_id)
            if part_path is None:
                logger.warning(f"Skipping slide {slide_number}: unresolved relationship {rel_id!r}")
                context.diagnostics.skipped_slides.append(slide_number)
                continue

            try:
                slides.append(slide_reader.read(part_path, slide_number, slide_size))
            except (
                CorruptPartError,
                MalformedDocumentError,
                MalformedPartError,
                PartNotFoundError,
            ) as e:
                logger.warning(f"Skipping slide {slide_number}: {e}")
                context.diagnostics.skipped_slides.append(slide_number)

        return slides
