"""Extract formatted text from <p:txBody> elements.

XML structure example:
    <p:txBody>
        <a:bodyPr/>
        <a:p>
            <a:pPr algn="ctr" lvl="1"><a:buChar char="•"/></a:pPr>
            <a:r>
                <a:rPr b="1" sz="2400"><a:solidFill><a:srgbClr val="FF0000"/></a:solidFill>
                    <a:latin typeface="Arial"/></a:rPr>
                <a:t>Hello</a:t>
            </a:r>
        </a:p>
    </p:txBody>
"""

from typing import Optional

from deckmodel.dsl.schema import Bullet, BulletKind, Paragraph, TextRun
from deckmodel.engine.units import FONT_SIZE_UNITS_PER_PT
from deckmodel.parser import xml_tree
from deckmodel.parser.style_extractor import StyleExtractor
from deckmodel.parser.xml_tree import Element

# Map <a:pPr algn> to paragraph alignment
ALIGN_MAP = {
    "l": "left",
    "ctr": "center",
    "r": "right",
    "just": "justify",
    "justLow": "justify",
    "dist": "distributed",
    "thaiDist": "distributed",
}

# Runs carrying text inside a paragraph; <a:br> is a soft line break
RUN_TAGS = ("r", "fld", "br")
LINE_BREAK = "\n"

UNDERLINE_OFF = ("none", "0", "false")


class TextExtractor:
    """Builds paragraph lists and flattened text from a text body."""

    def __init__(self, style_extractor: StyleExtractor, diagnostics=None) -> None:
        """Initialize the text extractor.

        Args:
            style_extractor: Resolves run colors.
            diagnostics: Optional ParseDiagnostics counting malformed numbers.
        """
        self.style_extractor = style_extractor
        self.diagnostics = diagnostics

    def extract_paragraphs(self, tx_body: Optional[Element]) -> list[Paragraph]:
        """Extract every <a:p> of a text body."""
        return [self._extract_paragraph(p) for p in xml_tree.children(tx_body, "a:p")]

    @staticmethod
    def flatten(paragraphs: list[Paragraph]) -> str:
        """Join paragraph texts with newlines and trim the result."""
        return "\n".join(paragraph.text for paragraph in paragraphs).strip()

    def _extract_paragraph(self, p: Element) -> Paragraph:
        p_pr = xml_tree.child(p, "a:pPr")
        runs = [
            self._extract_run(node)
            for node in xml_tree.children(p)
            if xml_tree.local_name(node) in RUN_TAGS
        ]
        return Paragraph(
            alignment=ALIGN_MAP.get(xml_tree.attr(p_pr, "algn", "l"), "left"),
            level=max(0, xml_tree.int_attr(p_pr, "lvl", 0, self.diagnostics)),
            bullet=self._extract_bullet(p_pr),
            runs=runs,
        )

    def _extract_bullet(self, p_pr: Optional[Element]) -> Optional[Bullet]:
        """Auto-numbered or literal bullet; None when neither is present."""
        auto_num = xml_tree.child(p_pr, "a:buAutoNum")
        if auto_num is not None:
            return Bullet(
                kind=BulletKind.AUTO_NUMBER,
                scheme=xml_tree.attr(auto_num, "type"),
                start_at=xml_tree.int_attr(auto_num, "startAt", 1, self.diagnostics),
            )

        bu_char = xml_tree.child(p_pr, "a:buChar")
        if bu_char is not None:
            return Bullet(kind=BulletKind.CHAR, char=xml_tree.attr(bu_char, "char", ""))

        return None

    def _extract_run(self, run: Element) -> TextRun:
        r_pr = xml_tree.child(run, "a:rPr")

        size = xml_tree.int_attr(r_pr, "sz", -1, self.diagnostics)
        underline = xml_tree.attr(r_pr, "u")

        return TextRun(
            text=self._run_text(run),
            bold=xml_tree.bool_attr(r_pr, "b"),
            italic=xml_tree.bool_attr(r_pr, "i"),
            underline=underline is not None and underline.lower() not in UNDERLINE_OFF,
            font_family=xml_tree.attr(xml_tree.child(r_pr, "a:latin"), "typeface"),
            font_size=size / FONT_SIZE_UNITS_PER_PT if size >= 0 else None,
            color=self.style_extractor.solid_fill_color(r_pr),
        )

    @staticmethod
    def _run_text(run: Element) -> str:
        if xml_tree.local_name(run) == "br":
            return LINE_BREAK
        return xml_tree.text_of(xml_tree.child(run, "a:t")) or ""
