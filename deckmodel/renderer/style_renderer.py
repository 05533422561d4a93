"""Apply fills, strokes and backgrounds to PowerPoint shapes."""

from typing import Any, Optional

from pptx.dml.color import RGBColor
from pptx.slide import Slide as PptxSlide
from pptx.util import Emu

from deckmodel.dsl.schema import Background, SolidBackground, Stroke
from deckmodel.engine.units import px_to_emu

# Fill of images whose bytes were not resolved
PLACEHOLDER_COLOR = "#CCCCCC"


def parse_color(color: Optional[str]) -> Optional[RGBColor]:
    """Parse a hex color string to RGBColor.

    Args:
        color: Hex color string (e.g., '#1F497D').

    Returns:
        RGBColor, or None when the string is not six hex digits.
    """
    if not color:
        return None
    value = color.lstrip("#")
    if len(value) != 6:
        return None
    try:
        return RGBColor.from_string(value.upper())
    except ValueError:
        return None


class StyleRenderer:
    """Applies visual styles to PowerPoint shapes."""

    def apply_fill(self, pptx_shape: Any, color: Optional[str]) -> None:
        """Apply a solid fill, or clear the fill when there is no color.

        Args:
            pptx_shape: The python-pptx shape object.
            color: Hex fill color.
        """
        rgb = parse_color(color)
        if rgb is None:
            pptx_shape.fill.background()
            return
        pptx_shape.fill.solid()
        pptx_shape.fill.fore_color.rgb = rgb

    def apply_stroke(self, pptx_shape: Any, stroke: Optional[Stroke]) -> None:
        """Apply a line, or hide it when there is none.

        Args:
            pptx_shape: The python-pptx shape object.
            stroke: The stroke specification.
        """
        line = pptx_shape.line
        if stroke is None:
            line.fill.background()
            return

        rgb = parse_color(stroke.color)
        if rgb is not None:
            line.color.rgb = rgb
        line.width = Emu(px_to_emu(stroke.width))

    def apply_background(self, slide: PptxSlide, background: Background) -> None:
        """Apply a solid background to a slide.

        Image backgrounds are drawn by the writer as a full-slide picture;
        anything else keeps the inherited background.
        """
        if isinstance(background, SolidBackground):
            rgb = parse_color(background.color)
            if rgb is not None:
                slide.background.fill.solid()
                slide.background.fill.fore_color.rgb = rgb
