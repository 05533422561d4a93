"""Extract visual styles from shape properties.

Covers solid fills, line strokes and slide backgrounds. Gradient, pattern and
picture fills on shapes are treated as no fill.
"""

import logging
from typing import Optional

from deckmodel.dsl.schema import (
    Background,
    ImageBackground,
    NoBackground,
    SolidBackground,
    Stroke,
    ThemeColors,
)
from deckmodel.engine.units import emu_to_px
from deckmodel.parser import xml_tree
from deckmodel.parser.context import ParseContext
from deckmodel.parser.media import load_media
from deckmodel.parser.xml_tree import Element

logger = logging.getLogger(__name__)

# <a:schemeClr val="..."> names mapped to ThemeColors attributes
SCHEME_COLOR_MAP = {
    "dk1": "dark1",
    "lt1": "light1",
    "dk2": "dark2",
    "lt2": "light2",
    "tx1": "dark1",
    "bg1": "light1",
    "tx2": "dark2",
    "bg2": "light2",
    "accent1": "accent1",
    "accent2": "accent2",
    "accent3": "accent3",
    "accent4": "accent4",
    "accent5": "accent5",
    "accent6": "accent6",
    "hlink": "hyperlink",
    "folHlink": "followed_hyperlink",
}


def normalize_hex(value: Optional[str]) -> Optional[str]:
    """'1f497d' -> '#1F497D'; anything that is not 6 hex digits -> None."""
    if not value:
        return None
    value = value.strip().lstrip("#")
    if len(value) != 6:
        return None
    try:
        int(value, 16)
    except ValueError:
        return None
    return f"#{value.upper()}"


class StyleExtractor:
    """Extracts colors, fills, strokes and backgrounds from DrawingML."""

    def __init__(self, theme_colors: Optional[ThemeColors] = None) -> None:
        """Initialize the style extractor.

        Args:
            theme_colors: Palette used to resolve <a:schemeClr> references.
        """
        self.theme_colors = theme_colors or ThemeColors()

    def extract_color(self, container: Optional[Element]) -> Optional[str]:
        """Extract a hex color from an element holding a color choice.

        Handles <a:srgbClr val>, <a:sysClr lastClr> and <a:schemeClr val>
        (resolved against the theme). Returns None when nothing resolves.
        """
        if container is None:
            return None

        srgb = xml_tree.child(container, "a:srgbClr")
        if srgb is not None:
            return normalize_hex(xml_tree.attr(srgb, "val"))

        sys_clr = xml_tree.child(container, "a:sysClr")
        if sys_clr is not None:
            return normalize_hex(xml_tree.attr(sys_clr, "lastClr"))

        scheme_clr = xml_tree.child(container, "a:schemeClr")
        if scheme_clr is not None:
            scheme_name = xml_tree.attr(scheme_clr, "val", "")
            attr_name = SCHEME_COLOR_MAP.get(scheme_name)
            if attr_name:
                return getattr(self.theme_colors, attr_name)
            logger.debug(f"Unknown scheme color {scheme_name!r}")

        return None

    def solid_fill_color(self, properties: Optional[Element]) -> Optional[str]:
        """Color of a direct <a:solidFill> child, or None."""
        return self.extract_color(xml_tree.child(properties, "a:solidFill"))

    def extract_stroke(self, sp_pr: Optional[Element], diagnostics=None) -> Optional[Stroke]:
        """Extract the line of a shape's <p:spPr>.

        XML structure example:
            <a:ln w="12700">
                <a:solidFill><a:srgbClr val="000000"/></a:solidFill>
            </a:ln>

        Returns:
            Stroke, or None when there is no line or it is explicitly hidden.
        """
        ln = xml_tree.child(sp_pr, "a:ln")
        if ln is None or xml_tree.child(ln, "a:noFill") is not None:
            return None

        width = xml_tree.int_attr(ln, "w", 0, diagnostics)
        return Stroke(
            width=emu_to_px(max(0, width)),
            color=self.solid_fill_color(ln),
        )

    def extract_background(
        self,
        slide_root: Element,
        context: ParseContext,
        part_path: str,
    ) -> Background:
        """Extract the background of a slide.

        XML structure examples:
            <p:bg><p:bgPr><a:solidFill><a:srgbClr val="FFFFFF"/></a:solidFill></p:bgPr></p:bg>
            <p:bg><p:bgPr><a:blipFill><a:blip r:embed="rId2"/></a:blipFill></p:bgPr></p:bg>
            <p:bg><p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef></p:bg>
        """
        bg = xml_tree.path(slide_root, "p:cSld", "p:bg")
        if bg is None:
            return NoBackground()

        bg_pr = xml_tree.child(bg, "p:bgPr")
        if bg_pr is not None:
            color = self.solid_fill_color(bg_pr)
            if color:
                return SolidBackground(color=color)

            blip = xml_tree.path(bg_pr, "a:blipFill", "a:blip")
            if blip is not None:
                _, payload = load_media(context, part_path, xml_tree.attr(blip, "r:embed"))
                if payload is None:
                    return ImageBackground()
                return ImageBackground(
                    src=payload.data_uri,
                    mime_type=payload.mime_type,
                    digest=payload.digest,
                )

        color = self.extract_color(xml_tree.child(bg, "p:bgRef"))
        if color:
            return SolidBackground(color=color)

        return NoBackground()
