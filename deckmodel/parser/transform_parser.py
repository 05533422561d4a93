"""Compose shape placement transforms into absolute slide geometry.

Parses <a:xfrm> XML for offset, extent, rotation and flips, and for groups
the child coordinate space (<a:chOff>/<a:chExt>). Rotation is stored in
60,000ths of a degree in PPTX and converted to degrees.

XML structure example:
    <a:xfrm rot="5400000" flipH="1">
        <a:off x="914400" y="914400"/>
        <a:ext cx="2743200" cy="914400"/>
        <a:chOff x="0" y="0"/>          (groups only)
        <a:chExt cx="2743200" cy="914400"/>
    </a:xfrm>
"""

from dataclasses import dataclass
from typing import Optional

from deckmodel.dsl.schema import EmuRect, GeometryBox
from deckmodel.engine.affine import (
    AffineMatrix,
    apply_to_rect,
    compose,
    mirror_about_point,
    rotate_about_point,
    scale,
    translate,
)
from deckmodel.engine.units import angle_to_degrees, emu_to_px
from deckmodel.parser import xml_tree
from deckmodel.parser.xml_tree import Element

# Pixel values are rounded to drop floating point noise from composition
PIXEL_PRECISION = 6


@dataclass(frozen=True)
class Xfrm:
    """Placement of one shape-tree node, all lengths in EMUs."""

    x: int = 0
    y: int = 0
    cx: int = 0
    cy: int = 0
    ch_x: int = 0
    ch_y: int = 0
    ch_cx: int = 0
    ch_cy: int = 0
    rotation: float = 0.0
    flip_h: bool = False
    flip_v: bool = False


class TransformParser:
    """Reads node transforms and maps them into absolute space."""

    def __init__(self, diagnostics=None) -> None:
        """Initialize the parser.

        Args:
            diagnostics: Optional ParseDiagnostics counting malformed numbers.
        """
        self.diagnostics = diagnostics

    def find_xfrm_element(self, node: Element) -> Optional[Element]:
        """Find the <a:xfrm> element of a shape-tree node.

        The xfrm element can be in different locations depending on the node type:
        - <p:sp><p:spPr><a:xfrm> for normal shapes, pictures and connectors
        - <p:grpSp><p:grpSpPr><a:xfrm> for groups
        - <p:graphicFrame><p:xfrm> for graphic frames
        """
        for names in (("p:spPr", "a:xfrm"), ("p:grpSpPr", "a:xfrm"), ("p:xfrm",)):
            xfrm = xml_tree.path(node, *names)
            if xfrm is not None:
                return xfrm
        return None

    def read_xfrm(self, node: Element) -> Xfrm:
        """Read a node's transform; missing pieces default to zero."""
        xfrm = self.find_xfrm_element(node)
        if xfrm is None:
            return Xfrm()

        off = xml_tree.child(xfrm, "a:off")
        ext = xml_tree.child(xfrm, "a:ext")
        ch_off = xml_tree.child(xfrm, "a:chOff")
        ch_ext = xml_tree.child(xfrm, "a:chExt")

        return Xfrm(
            x=self._int(off, "x"),
            y=self._int(off, "y"),
            cx=max(0, self._int(ext, "cx")),
            cy=max(0, self._int(ext, "cy")),
            ch_x=self._int(ch_off, "x"),
            ch_y=self._int(ch_off, "y"),
            ch_cx=max(0, self._int(ch_ext, "cx")),
            ch_cy=max(0, self._int(ch_ext, "cy")),
            rotation=angle_to_degrees(self._int(xfrm, "rot")),
            flip_h=xml_tree.bool_attr(xfrm, "flipH"),
            flip_v=xml_tree.bool_attr(xfrm, "flipV"),
        )

    def _int(self, element: Optional[Element], name: str) -> int:
        return xml_tree.int_attr(element, name, 0, self.diagnostics)

    def leaf_matrix(self, xfrm: Xfrm) -> AffineMatrix:
        """Local matrix: translate to the offset, mirror and rotate about the center."""
        center_x = xfrm.cx / 2
        center_y = xfrm.cy / 2
        local = translate(xfrm.x, xfrm.y)
        if xfrm.flip_h or xfrm.flip_v:
            local = compose(local, mirror_about_point(xfrm.flip_h, xfrm.flip_v, center_x, center_y))
        if xfrm.rotation:
            local = compose(local, rotate_about_point(xfrm.rotation, center_x, center_y))
        return local

    def child_space_matrix(self, xfrm: Xfrm) -> AffineMatrix:
        """Map a group's child space into its parent's space.

        scale = ext / chExt per axis (a zero denominator counts as 1) and
        translate = off - chOff * scale. Group rotation is not folded in.
        """
        scale_x = xfrm.cx / (xfrm.ch_cx or 1)
        scale_y = xfrm.cy / (xfrm.ch_cy or 1)
        return compose(
            translate(xfrm.x - xfrm.ch_x * scale_x, xfrm.y - xfrm.ch_y * scale_y),
            scale(scale_x, scale_y),
        )

    def placement_box(self, accumulated: AffineMatrix, xfrm: Xfrm) -> GeometryBox:
        """Absolute geometry of a node under the inherited accumulator.

        The pixel box encloses the node after rotation and flips; the EMU
        rectangle is the node's placement before them.
        """
        x, y, width, height = apply_to_rect(
            compose(accumulated, self.leaf_matrix(xfrm)), 0, 0, xfrm.cx, xfrm.cy
        )
        emu_x, emu_y, emu_cx, emu_cy = apply_to_rect(
            compose(accumulated, translate(xfrm.x, xfrm.y)), 0, 0, xfrm.cx, xfrm.cy
        )
        return GeometryBox(
            x=round(emu_to_px(x), PIXEL_PRECISION),
            y=round(emu_to_px(y), PIXEL_PRECISION),
            width=round(emu_to_px(width), PIXEL_PRECISION),
            height=round(emu_to_px(height), PIXEL_PRECISION),
            emu=EmuRect(x=round(emu_x), y=round(emu_y), cx=round(emu_cx), cy=round(emu_cy)),
        )
