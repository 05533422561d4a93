"""Classify shape-tree nodes and extract them into visual objects.

Walks a slide's <p:spTree> depth first, threading the accumulated transform
by value. Groups fold their child-space mapping into the accumulator before
recursing, so every object comes back in absolute slide space.
"""

import logging
from enum import Enum
from typing import Any, Optional

from deckmodel.dsl.schema import (
    Crop,
    GroupObject,
    ImageObject,
    ShapeObject,
    TextObject,
    VisualObject,
)
from deckmodel.engine.affine import AffineMatrix, compose, identity
from deckmodel.engine.units import percent_to_fraction
from deckmodel.parser import xml_tree
from deckmodel.parser.context import ParseContext
from deckmodel.parser.errors import MalformedDocumentError
from deckmodel.parser.media import load_media
from deckmodel.parser.style_extractor import StyleExtractor
from deckmodel.parser.text_extractor import TextExtractor
from deckmodel.parser.transform_parser import TransformParser, Xfrm
from deckmodel.parser.xml_tree import Element

logger = logging.getLogger(__name__)

# Shape-tree members that become visual objects
SHAPE_TREE_TAGS = ("sp", "pic", "grpSp", "cxnSp")

# Shape-tree members that are recognized but not extracted
UNSUPPORTED_TAGS = ("graphicFrame", "contentPart", "AlternateContent")

# Placeholder type when <p:ph> carries no type attribute
DEFAULT_PLACEHOLDER_TYPE = "obj"


class NodeKind(str, Enum):
    """Kinds of shape-tree nodes."""

    GROUP = "group"
    TEXT = "text"
    IMAGE = "image"
    SHAPE = "shape"


def embedded_blip(node: Element) -> Optional[Element]:
    """First <a:blip> below the node that carries an embed relationship ID."""
    for blip in xml_tree.iter_descendants(node, "a:blip"):
        if xml_tree.attr(blip, "r:embed"):
            return blip
    return None


def classify(node: Element) -> Optional[NodeKind]:
    """Decide a node's kind; first match wins.

    Order: group properties, text body, embedded image, generic shape.
    Returns None for anything that is not a shape-tree member.
    """
    if xml_tree.local_name(node) not in SHAPE_TREE_TAGS:
        return None
    if xml_tree.child(node, "p:grpSpPr") is not None:
        return NodeKind.GROUP
    if xml_tree.child(node, "p:txBody") is not None:
        return NodeKind.TEXT
    if embedded_blip(node) is not None:
        return NodeKind.IMAGE
    return NodeKind.SHAPE


class ShapeExtractor:
    """Extracts the visual objects of one slide part."""

    def __init__(self, context: ParseContext, part_path: str) -> None:
        """Initialize the shape extractor.

        Args:
            context: The current parse context.
            part_path: Slide part whose relationships resolve images.
        """
        self.context = context
        self.part_path = part_path
        self.style_extractor = StyleExtractor(context.theme_colors)
        self.text_extractor = TextExtractor(self.style_extractor, context.diagnostics)
        self.transform_parser = TransformParser(context.diagnostics)
        self._z_index_counter = 0

    def extract_shapes(self, sp_tree: Optional[Element]) -> list[VisualObject]:
        """Extract all objects of a shape tree in document order.

        The z-index counter restarts at zero for every call.

        Raises:
            MalformedDocumentError: If groups nest deeper than the context allows.
        """
        self._z_index_counter = 0
        return self._extract_children(sp_tree, identity(), depth=0)

    def _extract_children(
        self,
        container: Optional[Element],
        accumulated: AffineMatrix,
        depth: int,
    ) -> list[VisualObject]:
        result: list[VisualObject] = []
        for node in xml_tree.children(container):
            obj = self._extract_shape(node, accumulated, depth)
            if obj is not None:
                result.append(obj)
        return result

    def _extract_shape(
        self,
        node: Element,
        accumulated: AffineMatrix,
        depth: int,
    ) -> Optional[VisualObject]:
        """Extract a single node, or None if it is not a supported shape."""
        kind = classify(node)
        if kind is None:
            tag = xml_tree.local_name(node)
            if tag in UNSUPPORTED_TAGS:
                logger.debug(f"Skipping unsupported <{tag}> in {self.part_path}")
                self.context.diagnostics.unsupported_nodes += 1
            return None

        xfrm = self.transform_parser.read_xfrm(node)
        shape_dict = self._base_fields(node, kind, accumulated, xfrm)

        if kind == NodeKind.GROUP:
            return self._extract_group(node, shape_dict, accumulated, xfrm, depth)
        if kind == NodeKind.TEXT:
            return self._extract_text(node, shape_dict)
        if kind == NodeKind.IMAGE:
            return self._extract_image(node, shape_dict)
        return self._extract_generic_shape(node, shape_dict)

    def _base_fields(
        self,
        node: Element,
        kind: NodeKind,
        accumulated: AffineMatrix,
        xfrm: Xfrm,
    ) -> dict[str, Any]:
        """Fields shared by every object; consumes the next z-index."""
        z_index = self._z_index_counter
        self._z_index_counter += 1

        non_visual = self._non_visual_properties(node)
        c_nv_pr = xml_tree.child(non_visual, "p:cNvPr")
        ph = xml_tree.path(non_visual, "p:nvPr", "p:ph")

        return {
            "id": self.context.new_id(kind.value),
            "name": xml_tree.attr(c_nv_pr, "name", ""),
            "z_index": z_index,
            "rotation": xfrm.rotation,
            "flip_h": xfrm.flip_h,
            "flip_v": xfrm.flip_v,
            "geometry": self.transform_parser.placement_box(accumulated, xfrm),
            "placeholder": xml_tree.attr(ph, "type", DEFAULT_PLACEHOLDER_TYPE) if ph is not None else None,
        }

    def _non_visual_properties(self, node: Element) -> Optional[Element]:
        """The <p:nvSpPr>, <p:nvPicPr>, <p:nvGrpSpPr> or <p:nvCxnSpPr> child."""
        for candidate in xml_tree.children(node):
            name = xml_tree.local_name(candidate)
            if name.startswith("nv") and name.endswith("Pr"):
                return candidate
        return None

    def _extract_group(
        self,
        node: Element,
        shape_dict: dict[str, Any],
        accumulated: AffineMatrix,
        xfrm: Xfrm,
        depth: int,
    ) -> GroupObject:
        """Extract a group with its children already in absolute space."""
        child_depth = depth + 1
        if child_depth > self.context.max_depth:
            raise MalformedDocumentError(
                f"Groups nested deeper than {self.context.max_depth} levels in {self.part_path}"
            )

        child_accumulated = compose(accumulated, self.transform_parser.child_space_matrix(xfrm))
        children = self._extract_children(node, child_accumulated, child_depth)
        return GroupObject(children=children, **shape_dict)

    def _extract_text(self, node: Element, shape_dict: dict[str, Any]) -> TextObject:
        """Extract a text shape."""
        paragraphs = self.text_extractor.extract_paragraphs(xml_tree.child(node, "p:txBody"))
        return TextObject(
            text=self.text_extractor.flatten(paragraphs),
            paragraphs=paragraphs,
            **shape_dict,
        )

    def _extract_image(self, node: Element, shape_dict: dict[str, Any]) -> ImageObject:
        """Extract a picture; unresolved media yields an image with no payload."""
        blip = embedded_blip(node)
        target, payload = load_media(self.context, self.part_path, xml_tree.attr(blip, "r:embed"))

        image_dict: dict[str, Any] = {
            "target": target,
            "crop": self._extract_crop(node),
        }
        if payload is not None:
            image_dict.update(
                src=payload.data_uri,
                mime_type=payload.mime_type,
                digest=payload.digest,
            )
        return ImageObject(**image_dict, **shape_dict)

    def _extract_crop(self, node: Element) -> Optional[Crop]:
        """Crop fractions from <a:srcRect l t r b>, each divided by 100000."""
        src_rect = xml_tree.find_first(node, "a:srcRect")
        if src_rect is None:
            return None

        diagnostics = self.context.diagnostics
        return Crop(
            left=percent_to_fraction(xml_tree.int_attr(src_rect, "l", 0, diagnostics)),
            top=percent_to_fraction(xml_tree.int_attr(src_rect, "t", 0, diagnostics)),
            right=percent_to_fraction(xml_tree.int_attr(src_rect, "r", 0, diagnostics)),
            bottom=percent_to_fraction(xml_tree.int_attr(src_rect, "b", 0, diagnostics)),
        )

    def _extract_generic_shape(self, node: Element, shape_dict: dict[str, Any]) -> ShapeObject:
        """Extract a shape with optional fill and stroke."""
        sp_pr = xml_tree.child(node, "p:spPr")

        preset = xml_tree.attr(xml_tree.child(sp_pr, "a:prstGeom"), "prst")
        if preset is None and xml_tree.child(sp_pr, "a:custGeom") is not None:
            preset = "custom"

        return ShapeObject(
            fill=self.style_extractor.solid_fill_color(sp_pr),
            stroke=self.style_extractor.extract_stroke(sp_pr, self.context.diagnostics),
            preset=preset,
            **shape_dict,
        )
