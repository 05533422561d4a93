"""High-level PPTX generation from presentation documents."""

import logging
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from pptx import Presentation
from pptx.util import Emu

from deckmodel.dsl.schema import ImageBackground, PresentationDocument, Slide
from deckmodel.engine.units import px_to_emu
from deckmodel.renderer.shape_renderer import ShapeRenderer
from deckmodel.renderer.style_renderer import StyleRenderer

logger = logging.getLogger(__name__)

# Index of the "Blank" layout in the default python-pptx template
BLANK_LAYOUT_INDEX = 6


class PPTXWriter:
    """Generates PPTX files from presentation documents."""

    def __init__(self) -> None:
        """Initialize the PPTX writer."""
        self.shape_renderer = ShapeRenderer()
        self.style_renderer = StyleRenderer()

    def write(
        self,
        document: PresentationDocument,
        output: Union[str, Path, BinaryIO, None] = None,
    ) -> Optional[bytes]:
        """Write a document to a PPTX file.

        Args:
            document: The document to render.
            output: Output path, file object, or None to return bytes.

        Returns:
            PPTX bytes if output is None, otherwise None.
        """
        slide_size = document.metadata.slide_size
        prs = Presentation()
        prs.slide_width = Emu(px_to_emu(slide_size.width))
        prs.slide_height = Emu(px_to_emu(slide_size.height))

        core = prs.core_properties
        core.title = document.metadata.title or document.name
        core.author = document.metadata.author
        if document.metadata.subject:
            core.subject = document.metadata.subject

        for slide in document.slides:
            self._render_slide(prs, slide)

        if output is None:
            buffer = BytesIO()
            prs.save(buffer)
            buffer.seek(0)
            return buffer.read()
        elif isinstance(output, (str, Path)):
            prs.save(str(output))
            return None
        else:
            prs.save(output)
            return None

    def _render_slide(self, prs: Presentation, slide: Slide) -> None:
        """Render a single slide.

        Args:
            prs: The Presentation object.
            slide: The slide to render.
        """
        pptx_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])
        pptx_slide._element.cSld.set("name", slide.name)

        self.style_renderer.apply_background(pptx_slide, slide.background)
        if isinstance(slide.background, ImageBackground):
            self._render_background_image(prs, pptx_slide, slide.background)

        for obj in sorted(slide.objects, key=lambda o: o.z_index):
            self.shape_renderer.render(pptx_slide.shapes, obj)

        if slide.notes:
            pptx_slide.notes_slide.notes_text_frame.text = slide.notes

    def _render_background_image(self, prs: Presentation, pptx_slide, background: ImageBackground) -> None:
        """Draw an image background as a full-slide picture behind every shape."""
        payload = background.payload()
        if payload is None:
            return
        try:
            pptx_slide.shapes.add_picture(BytesIO(payload), 0, 0, prs.slide_width, prs.slide_height)
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot embed background image: {e}")
