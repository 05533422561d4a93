"""Render visual objects to PowerPoint shapes."""

import logging
from io import BytesIO
from typing import Any

from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE
from pptx.oxml.ns import qn
from pptx.util import Emu

from deckmodel.dsl.schema import (
    BaseObject,
    GroupObject,
    ImageObject,
    ShapeObject,
    TextObject,
    VisualObject,
)
from deckmodel.engine.units import degrees_to_angle
from deckmodel.renderer.style_renderer import PLACEHOLDER_COLOR, StyleRenderer
from deckmodel.renderer.text_renderer import TextRenderer

logger = logging.getLogger(__name__)

# Map <a:prstGeom prst> names to MSO_SHAPE
AUTO_SHAPE_MAP: dict[str, MSO_SHAPE] = {
    # Basic shapes
    "rect": MSO_SHAPE.RECTANGLE,
    "roundRect": MSO_SHAPE.ROUNDED_RECTANGLE,
    "ellipse": MSO_SHAPE.OVAL,
    "triangle": MSO_SHAPE.ISOSCELES_TRIANGLE,
    "rtTriangle": MSO_SHAPE.RIGHT_TRIANGLE,
    "diamond": MSO_SHAPE.DIAMOND,
    "parallelogram": MSO_SHAPE.PARALLELOGRAM,
    "trapezoid": MSO_SHAPE.TRAPEZOID,
    "pentagon": MSO_SHAPE.REGULAR_PENTAGON,
    "hexagon": MSO_SHAPE.HEXAGON,
    "heptagon": MSO_SHAPE.HEPTAGON,
    "octagon": MSO_SHAPE.OCTAGON,
    "decagon": MSO_SHAPE.DECAGON,
    "dodecagon": MSO_SHAPE.DODECAGON,
    # Arrows
    "rightArrow": MSO_SHAPE.RIGHT_ARROW,
    "leftArrow": MSO_SHAPE.LEFT_ARROW,
    "upArrow": MSO_SHAPE.UP_ARROW,
    "downArrow": MSO_SHAPE.DOWN_ARROW,
    "chevron": MSO_SHAPE.CHEVRON,
    "homePlate": MSO_SHAPE.PENTAGON,
    "notchedRightArrow": MSO_SHAPE.NOTCHED_RIGHT_ARROW,
    "blockArc": MSO_SHAPE.BLOCK_ARC,
    # Flowchart
    "flowChartProcess": MSO_SHAPE.FLOWCHART_PROCESS,
    "flowChartDecision": MSO_SHAPE.FLOWCHART_DECISION,
    "flowChartTerminator": MSO_SHAPE.FLOWCHART_TERMINATOR,
    "flowChartInputOutput": MSO_SHAPE.FLOWCHART_DATA,
    # Callouts
    "wedgeRectCallout": MSO_SHAPE.RECTANGULAR_CALLOUT,
    "wedgeRoundRectCallout": MSO_SHAPE.ROUNDED_RECTANGULAR_CALLOUT,
    "wedgeEllipseCallout": MSO_SHAPE.OVAL_CALLOUT,
    "cloudCallout": MSO_SHAPE.CLOUD_CALLOUT,
    # Stars and banners
    "star4": MSO_SHAPE.STAR_4_POINT,
    "star5": MSO_SHAPE.STAR_5_POINT,
    "star6": MSO_SHAPE.STAR_6_POINT,
    "ribbon2": MSO_SHAPE.UP_RIBBON,
    "ribbon": MSO_SHAPE.DOWN_RIBBON,
    "wave": MSO_SHAPE.WAVE,
    # Other
    "heart": MSO_SHAPE.HEART,
    "lightningBolt": MSO_SHAPE.LIGHTNING_BOLT,
    "sun": MSO_SHAPE.SUN,
    "moon": MSO_SHAPE.MOON,
    "cloud": MSO_SHAPE.CLOUD,
    "arc": MSO_SHAPE.ARC,
    "donut": MSO_SHAPE.DONUT,
    "noSmoking": MSO_SHAPE.NO_SYMBOL,
    "plus": MSO_SHAPE.CROSS,
    "cube": MSO_SHAPE.CUBE,
    "can": MSO_SHAPE.CAN,
    "pie": MSO_SHAPE.PIE,
    "chord": MSO_SHAPE.CHORD,
    "frame": MSO_SHAPE.FRAME,
    "bevel": MSO_SHAPE.BEVEL,
    "foldedCorner": MSO_SHAPE.FOLDED_CORNER,
    "smileyFace": MSO_SHAPE.SMILEY_FACE,
}

# Presets written as straight connectors
CONNECTOR_PRESETS = ("line", "straightConnector1")


class ShapeRenderer:
    """Renders visual objects onto a slide or group shape collection."""

    def __init__(self) -> None:
        """Initialize the shape renderer."""
        self.style_renderer = StyleRenderer()
        self.text_renderer = TextRenderer()

    def render(self, shapes: Any, obj: VisualObject) -> None:
        """Render an object into a shape collection.

        Args:
            shapes: python-pptx SlideShapes or GroupShapes.
            obj: The visual object to render.
        """
        if isinstance(obj, GroupObject):
            self._render_group(shapes, obj)
        elif isinstance(obj, TextObject):
            self._render_text_box(shapes, obj)
        elif isinstance(obj, ImageObject):
            self._render_image(shapes, obj)
        elif isinstance(obj, ShapeObject):
            self._render_auto_shape(shapes, obj)

    def _box(self, obj: BaseObject) -> tuple[Emu, Emu, Emu, Emu]:
        emu = obj.geometry.emu
        return Emu(emu.x), Emu(emu.y), Emu(emu.cx), Emu(emu.cy)

    def _render_auto_shape(self, shapes: Any, obj: ShapeObject) -> None:
        """Render a preset shape with fill and stroke."""
        if obj.preset in CONNECTOR_PRESETS:
            self._render_connector(shapes, obj)
            return

        mso_shape = AUTO_SHAPE_MAP.get(obj.preset or "rect", MSO_SHAPE.RECTANGLE)
        pptx_shape = shapes.add_shape(mso_shape, *self._box(obj))
        pptx_shape.name = obj.name or pptx_shape.name
        self._remove_text_body(pptx_shape)

        self.style_renderer.apply_fill(pptx_shape, obj.fill)
        self.style_renderer.apply_stroke(pptx_shape, obj.stroke)
        self._apply_transform(pptx_shape, obj)

    def _render_connector(self, shapes: Any, obj: ShapeObject) -> None:
        """Render a straight line from the top-left to the bottom-right corner."""
        emu = obj.geometry.emu
        connector = shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT,
            Emu(emu.x),
            Emu(emu.y),
            Emu(emu.x + emu.cx),
            Emu(emu.y + emu.cy),
        )
        connector.name = obj.name or connector.name

        if obj.stroke is not None:
            self.style_renderer.apply_stroke(connector, obj.stroke)
        self._apply_transform(connector, obj)

    def _render_text_box(self, shapes: Any, obj: TextObject) -> None:
        """Render a text box."""
        text_box = shapes.add_textbox(*self._box(obj))
        text_box.name = obj.name or text_box.name

        self.text_renderer.render(text_box, obj.paragraphs)
        self._apply_transform(text_box, obj)

    def _render_image(self, shapes: Any, obj: ImageObject) -> None:
        """Render a picture; images without bytes become grey rectangles."""
        payload = obj.payload()
        if payload is not None:
            try:
                picture = shapes.add_picture(BytesIO(payload), *self._box(obj))
            except (OSError, ValueError) as e:
                logger.warning(f"Cannot embed image {obj.id}: {e}")
            else:
                picture.name = obj.name or picture.name
                if obj.crop is not None:
                    picture.crop_left = obj.crop.left
                    picture.crop_top = obj.crop.top
                    picture.crop_right = obj.crop.right
                    picture.crop_bottom = obj.crop.bottom
                self._apply_transform(picture, obj)
                return

        placeholder = shapes.add_shape(MSO_SHAPE.RECTANGLE, *self._box(obj))
        placeholder.name = obj.name or placeholder.name
        self._remove_text_body(placeholder)
        self.style_renderer.apply_fill(placeholder, PLACEHOLDER_COLOR)
        self.style_renderer.apply_stroke(placeholder, None)
        self._apply_transform(placeholder, obj)

    def _render_group(self, shapes: Any, obj: GroupObject) -> None:
        """Render a group; children keep their absolute slide positions."""
        group = shapes.add_group_shape()
        group.name = obj.name or group.name

        for child in sorted(obj.children, key=lambda c: c.z_index):
            self.render(group.shapes, child)
        # Nested groups are filled after their parent last sized itself
        group._element.recalculate_extents()

        self._apply_transform(group, obj)

    def _remove_text_body(self, pptx_shape: Any) -> None:
        """Drop the empty <p:txBody> python-pptx adds to auto shapes."""
        tx_body = pptx_shape._element.find(qn("p:txBody"))
        if tx_body is not None:
            pptx_shape._element.remove(tx_body)

    def _apply_transform(self, pptx_shape: Any, obj: BaseObject) -> None:
        """Write rotation and flips onto the shape's <a:xfrm>."""
        if not (obj.rotation or obj.flip_h or obj.flip_v):
            return

        element = pptx_shape._element
        properties = element.find(qn("p:spPr"))
        if properties is None:
            properties = element.find(qn("p:grpSpPr"))
        xfrm = properties.find(qn("a:xfrm")) if properties is not None else None
        if xfrm is None:
            logger.debug(f"Shape {obj.id} has no transform to update")
            return

        if obj.rotation:
            xfrm.set("rot", str(degrees_to_angle(obj.rotation)))
        if obj.flip_h:
            xfrm.set("flipH", "1")
        if obj.flip_v:
            xfrm.set("flipV", "1")
