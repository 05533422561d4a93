"""Extract the theme palette and fonts of a presentation.

Parses <a:clrScheme> and <a:fontScheme> from the theme part referenced by
the presentation (or, failing that, by its first slide master).
"""

import logging
from typing import Optional

from deckmodel.dsl.schema import Theme, ThemeColors
from deckmodel.parser import xml_tree
from deckmodel.parser.context import ParseContext
from deckmodel.parser.errors import CorruptPartError, MalformedPartError
from deckmodel.parser.relationships import REL_SLIDE_MASTER, REL_THEME
from deckmodel.parser.style_extractor import normalize_hex
from deckmodel.parser.xml_tree import Element

logger = logging.getLogger(__name__)

# Theme color element names mapped to ThemeColors attributes
THEME_COLOR_MAP = {
    "dk1": "dark1",
    "lt1": "light1",
    "dk2": "dark2",
    "lt2": "light2",
    "accent1": "accent1",
    "accent2": "accent2",
    "accent3": "accent3",
    "accent4": "accent4",
    "accent5": "accent5",
    "accent6": "accent6",
    "hlink": "hyperlink",
    "folHlink": "followed_hyperlink",
}

# Common system colors used when <a:sysClr> has no lastClr
SYSTEM_COLORS = {
    "windowText": "#000000",
    "window": "#FFFFFF",
    "highlight": "#0078D7",
    "highlightText": "#FFFFFF",
    "btnFace": "#F0F0F0",
    "btnText": "#000000",
}


class ThemeParser:
    """Extracts the theme of a PPTX package."""

    def extract_theme(self, context: ParseContext, presentation_part: str) -> Optional[Theme]:
        """Extract the theme of a presentation.

        Args:
            context: The current parse context.
            presentation_part: Path of the main presentation part.

        Returns:
            Theme, or None when the package has no readable theme.

        XML structure example:
            <a:theme name="Office Theme">
                <a:themeElements>
                    <a:clrScheme name="Office">
                        <a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>
                        <a:accent1><a:srgbClr val="4472C4"/></a:accent1>
                        ...
                    </a:clrScheme>
                    <a:fontScheme name="Office">
                        <a:majorFont><a:latin typeface="Calibri Light"/></a:majorFont>
                        <a:minorFont><a:latin typeface="Calibri"/></a:minorFont>
                    </a:fontScheme>
                </a:themeElements>
            </a:theme>
        """
        try:
            theme_path = self._find_theme_part(context, presentation_part)
            if theme_path is None:
                logger.debug("Presentation has no theme part")
                return None
            root = context.read_optional_part(theme_path)
        except (CorruptPartError, MalformedPartError) as e:
            logger.warning(f"Ignoring unreadable theme: {e}")
            return None
        if root is None:
            logger.warning(f"Theme part {theme_path} is missing")
            return None

        elements = xml_tree.child(root, "a:themeElements")
        font_scheme = xml_tree.child(elements, "a:fontScheme")

        return Theme(
            name=xml_tree.attr(root, "name", ""),
            colors=self.extract_colors(xml_tree.child(elements, "a:clrScheme")),
            major_font=self._typeface(xml_tree.child(font_scheme, "a:majorFont")),
            minor_font=self._typeface(xml_tree.child(font_scheme, "a:minorFont")),
        )

    def _find_theme_part(self, context: ParseContext, presentation_part: str) -> Optional[str]:
        rel = context.relationships(presentation_part).first_of_type(REL_THEME)
        if rel is not None and not rel.external:
            return rel.target

        master = context.relationships(presentation_part).first_of_type(REL_SLIDE_MASTER)
        if master is None or master.external:
            return None
        rel = context.relationships(master.target).first_of_type(REL_THEME)
        if rel is None or rel.external:
            return None
        return rel.target

    def extract_colors(self, clr_scheme: Optional[Element]) -> ThemeColors:
        """Read every palette entry of a <a:clrScheme>."""
        colors: dict[str, str] = {}
        for xml_name, attr_name in THEME_COLOR_MAP.items():
            hex_color = self._extract_color_value(xml_tree.child(clr_scheme, xml_name))
            if hex_color:
                colors[attr_name] = hex_color
        return ThemeColors(**colors)

    def _extract_color_value(self, color_elem: Optional[Element]) -> Optional[str]:
        """Hex value of a palette entry such as <a:dk1>."""
        srgb = xml_tree.child(color_elem, "a:srgbClr")
        if srgb is not None:
            return normalize_hex(xml_tree.attr(srgb, "val"))

        sys_clr = xml_tree.child(color_elem, "a:sysClr")
        if sys_clr is not None:
            last_clr = normalize_hex(xml_tree.attr(sys_clr, "lastClr"))
            if last_clr:
                return last_clr
            return SYSTEM_COLORS.get(xml_tree.attr(sys_clr, "val", ""))

        return None

    def _typeface(self, font: Optional[Element]) -> Optional[str]:
        typeface = xml_tree.attr(xml_tree.child(font, "a:latin"), "typeface")
        return typeface or None
