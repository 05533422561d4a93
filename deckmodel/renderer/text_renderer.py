"""Render paragraphs and runs into PowerPoint text frames."""

from typing import Any

from lxml import etree
from pptx.enum.text import PP_ALIGN
from pptx.oxml.ns import qn
from pptx.util import Pt

from deckmodel.dsl.schema import Bullet, BulletKind, Paragraph, TextRun
from deckmodel.renderer.style_renderer import parse_color

# Map paragraph alignment to PowerPoint
ALIGN_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
    "distributed": PP_ALIGN.DISTRIBUTE,
}

# PowerPoint supports indent levels 0-8
MAX_LEVEL = 8

# Run text standing for a soft line break (<a:br>)
LINE_BREAK = "\n"


class TextRenderer:
    """Renders text content to PowerPoint shapes."""

    def render(self, pptx_shape: Any, paragraphs: list[Paragraph]) -> None:
        """Render paragraphs into a shape's text frame.

        Args:
            pptx_shape: The python-pptx shape object.
            paragraphs: Paragraphs in order.
        """
        if not paragraphs or not hasattr(pptx_shape, "text_frame"):
            return

        text_frame = pptx_shape.text_frame
        text_frame.word_wrap = True

        for index, paragraph in enumerate(paragraphs):
            if index == 0:
                pptx_paragraph = text_frame.paragraphs[0]
            else:
                pptx_paragraph = text_frame.add_paragraph()

            pptx_paragraph.alignment = ALIGN_MAP.get(paragraph.alignment, PP_ALIGN.LEFT)
            pptx_paragraph.level = min(paragraph.level, MAX_LEVEL)
            if paragraph.bullet is not None:
                self._apply_bullet(pptx_paragraph, paragraph.bullet)

            for text_run in paragraph.runs:
                if text_run.text == LINE_BREAK:
                    pptx_paragraph.add_line_break()
                    continue
                self._apply_run_formatting(pptx_paragraph.add_run(), text_run)

    def _apply_bullet(self, pptx_paragraph: Any, bullet: Bullet) -> None:
        """Add <a:buAutoNum> or <a:buChar> to the paragraph properties."""
        p_pr = pptx_paragraph._p.get_or_add_pPr()
        if bullet.kind == BulletKind.AUTO_NUMBER:
            element = etree.SubElement(p_pr, qn("a:buAutoNum"))
            element.set("type", bullet.scheme or "arabicPeriod")
            if bullet.start_at != 1:
                element.set("startAt", str(bullet.start_at))
        else:
            element = etree.SubElement(p_pr, qn("a:buChar"))
            element.set("char", bullet.char or "•")

    def _apply_run_formatting(self, run: Any, text_run: TextRun) -> None:
        """Apply formatting to a text run.

        Args:
            run: The python-pptx Run object.
            text_run: The text run.
        """
        run.text = text_run.text

        font = run.font
        if text_run.font_family:
            font.name = text_run.font_family
        if text_run.font_size is not None:
            font.size = Pt(text_run.font_size)
        font.bold = text_run.bold
        font.italic = text_run.italic
        font.underline = text_run.underline

        rgb = parse_color(text_run.color)
        if rgb is not None:
            font.color.rgb = rgb
