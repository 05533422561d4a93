"""Pydantic v2 models for the normalized presentation document.

This module defines the renderer-agnostic document produced by the parser.
All geometry is expressed in pixels at 96 DPI unless a field says otherwise;
the originating EMU rectangle (1 inch = 914400 EMUs) is kept next to every
pixel box so a writer can re-emit shapes without rounding loss.
"""

import base64
import binascii
from datetime import datetime
from enum import Enum
from typing import Annotated, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BulletKind(str, Enum):
    """Paragraph bullet kinds."""

    CHAR = "char"
    AUTO_NUMBER = "autoNumber"


# ============================================================================
# Geometry Models
# ============================================================================


class EmuRect(BaseModel):
    """Rectangle in EMUs."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(default=0, description="Left position in EMUs")
    y: int = Field(default=0, description="Top position in EMUs")
    cx: int = Field(default=0, ge=0, description="Width in EMUs")
    cy: int = Field(default=0, ge=0, description="Height in EMUs")


class GeometryBox(BaseModel):
    """Absolute-space bounding box in pixels.

    ``emu`` holds the absolute placement rectangle before the object's own
    rotation and flips are applied.
    """

    model_config = ConfigDict(frozen=True)

    x: float = Field(default=0.0, description="Left position in pixels")
    y: float = Field(default=0.0, description="Top position in pixels")
    width: float = Field(default=0.0, ge=0, description="Width in pixels")
    height: float = Field(default=0.0, ge=0, description="Height in pixels")
    emu: EmuRect = Field(default_factory=EmuRect, description="Placement rectangle in EMUs")

    @property
    def right(self) -> float:
        """Right edge position."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge position."""
        return self.y + self.height

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no area."""
        return self.width == 0 or self.height == 0


# ============================================================================
# Text Models
# ============================================================================


class TextRun(BaseModel):
    """A run of text with consistent formatting."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="The text content")
    bold: bool = Field(default=False)
    italic: bool = Field(default=False)
    underline: bool = Field(default=False)
    font_family: Optional[str] = Field(default=None, description="Latin typeface")
    font_size: Optional[float] = Field(default=None, ge=0, description="Font size in points")
    color: Optional[str] = Field(default=None, description="RGB hex color (e.g., '#1F497D')")


class Bullet(BaseModel):
    """Paragraph bullet descriptor."""

    model_config = ConfigDict(frozen=True)

    kind: BulletKind
    char: Optional[str] = Field(default=None, description="Literal bullet character")
    scheme: Optional[str] = Field(default=None, description="Auto-number scheme (e.g., 'arabicPeriod')")
    start_at: int = Field(default=1, description="First number of an auto-numbered list")


class Paragraph(BaseModel):
    """A paragraph of text runs."""

    model_config = ConfigDict(frozen=True)

    alignment: Literal["left", "center", "right", "justify", "distributed"] = Field(default="left")
    level: int = Field(default=0, ge=0, description="Indent level")
    bullet: Optional[Bullet] = None
    runs: list[TextRun] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated run text."""
        return "".join(run.text for run in self.runs)


# ============================================================================
# Style Models
# ============================================================================


class Stroke(BaseModel):
    """Line/border stroke properties."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(default=0.0, ge=0, description="Line width in pixels")
    color: Optional[str] = Field(default=None, description="RGB hex color")


class Crop(BaseModel):
    """Fractional crop rectangle, as in <a:srcRect>."""

    model_config = ConfigDict(frozen=True)

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0


# ============================================================================
# Visual Objects
# ============================================================================


class BaseObject(BaseModel):
    """Fields shared by every visual object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique object identifier")
    name: str = Field(default="", description="Human-readable shape name")
    z_index: int = Field(default=0, description="Paint order (higher = on top)")
    rotation: float = Field(default=0.0, description="Rotation in degrees, clockwise")
    flip_h: bool = Field(default=False, description="Horizontal flip")
    flip_v: bool = Field(default=False, description="Vertical flip")
    geometry: GeometryBox = Field(default_factory=GeometryBox, description="Absolute bounding box")
    placeholder: Optional[str] = Field(default=None, description="Placeholder type, if any")


class TextObject(BaseObject):
    """A shape carrying a text body."""

    type: Literal["text"] = "text"
    text: str = Field(default="", description="Plain-text flattening of all runs")
    paragraphs: list[Paragraph] = Field(default_factory=list)


class ImageObject(BaseObject):
    """A picture, with its payload embedded as a data URI."""

    type: Literal["image"] = "image"
    src: Optional[str] = Field(default=None, description="Data URI of the image bytes")
    mime_type: Optional[str] = None
    digest: Optional[str] = Field(default=None, description="SHA-256 of the image bytes")
    target: Optional[str] = Field(default=None, description="Package path of the media part")
    crop: Optional[Crop] = None

    @property
    def has_payload(self) -> bool:
        """True when the image bytes were resolved."""
        return self.src is not None

    def payload(self) -> Optional[bytes]:
        """Decode the image bytes from the data URI."""
        return decode_data_uri(self.src)


class ShapeObject(BaseObject):
    """A generic shape (no text, no image)."""

    type: Literal["shape"] = "shape"
    fill: Optional[str] = Field(default=None, description="Solid fill color")
    stroke: Optional[Stroke] = None
    preset: Optional[str] = Field(default=None, description="Preset geometry (e.g., 'rect', 'ellipse')")


class GroupObject(BaseObject):
    """A group whose children are already in absolute space."""

    type: Literal["group"] = "group"
    children: list["VisualObject"] = Field(default_factory=list)


VisualObject = Annotated[
    Union[TextObject, ImageObject, ShapeObject, GroupObject],
    Field(discriminator="type"),
]

GroupObject.model_rebuild()


# ============================================================================
# Background Models
# ============================================================================


class NoBackground(BaseModel):
    """No explicit slide background."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class SolidBackground(BaseModel):
    """Solid color background."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["solid"] = "solid"
    color: str


class ImageBackground(BaseModel):
    """Picture background."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    src: Optional[str] = None
    mime_type: Optional[str] = None
    digest: Optional[str] = None

    def payload(self) -> Optional[bytes]:
        """Decode the image bytes from the data URI."""
        return decode_data_uri(self.src)


Background = Annotated[
    Union[NoBackground, SolidBackground, ImageBackground],
    Field(discriminator="kind"),
]


# ============================================================================
# Slide & Document Models
# ============================================================================


class Slide(BaseModel):
    """A single slide."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique slide identifier")
    slide_number: int = Field(ge=1, description="Position in the presentation's slide list")
    name: str = Field(default="")
    width: float = Field(ge=0, description="Slide width in pixels")
    height: float = Field(ge=0, description="Slide height in pixels")
    objects: list[VisualObject] = Field(default_factory=list, description="Objects in document order")
    background: Background = Field(default_factory=NoBackground)
    notes: Optional[str] = Field(default=None, description="Speaker notes")

    def iter_objects(self) -> Iterator[Union[TextObject, ImageObject, ShapeObject, GroupObject]]:
        """Walk all objects depth first, groups before their children."""
        stack = list(reversed(self.objects))
        while stack:
            obj = stack.pop()
            yield obj
            if isinstance(obj, GroupObject):
                stack.extend(reversed(obj.children))

    def leaves(self) -> list[Union[TextObject, ImageObject, ShapeObject]]:
        """Non-group objects in paint order, with groups flattened away."""
        return [obj for obj in self.iter_objects() if not isinstance(obj, GroupObject)]

    def get_object_by_id(self, object_id: str):
        """Find an object by its ID, searching inside groups."""
        for obj in self.iter_objects():
            if obj.id == object_id:
                return obj
        return None


class SlideSize(BaseModel):
    """Nominal slide size."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0, description="Width in pixels")
    height: float = Field(ge=0, description="Height in pixels")
    type: Optional[str] = Field(default=None, description="Size preset (e.g., 'screen4x3')")


class ThemeColors(BaseModel):
    """PowerPoint theme color palette."""

    model_config = ConfigDict(frozen=True)

    dark1: Optional[str] = None
    light1: Optional[str] = None
    dark2: Optional[str] = None
    light2: Optional[str] = None
    accent1: Optional[str] = None
    accent2: Optional[str] = None
    accent3: Optional[str] = None
    accent4: Optional[str] = None
    accent5: Optional[str] = None
    accent6: Optional[str] = None
    hyperlink: Optional[str] = None
    followed_hyperlink: Optional[str] = None


class Theme(BaseModel):
    """Presentation theme."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    colors: ThemeColors = Field(default_factory=ThemeColors)
    major_font: Optional[str] = None
    minor_font: Optional[str] = None


class DocumentMetadata(BaseModel):
    """Document-level metadata."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    author: str = "Unknown"
    subject: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    category: Optional[str] = None
    last_modified_by: Optional[str] = None
    revision: Optional[int] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    slide_count: int = Field(default=0, ge=0)
    slide_size: SlideSize
    theme: Optional[Theme] = None


class ParseReport(BaseModel):
    """Counts of problems recovered during a parse."""

    model_config = ConfigDict(frozen=True)

    skipped_slides: list[int] = Field(default_factory=list, description="Slide numbers that failed")
    missing_media: int = Field(default=0, ge=0)
    malformed_values: int = Field(default=0, ge=0)
    unsupported_nodes: int = Field(default=0, ge=0)

    @property
    def is_clean(self) -> bool:
        """True when nothing had to be recovered."""
        return not (self.skipped_slides or self.missing_media or self.malformed_values)


class PresentationDocument(BaseModel):
    """A parsed presentation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique document identifier")
    name: str
    slides: list[Slide] = Field(default_factory=list)
    metadata: DocumentMetadata
    report: ParseReport = Field(default_factory=ParseReport)

    def get_slide_by_id(self, slide_id: str) -> Optional[Slide]:
        """Find a slide by its ID."""
        for slide in self.slides:
            if slide.id == slide_id:
                return slide
        return None


def decode_data_uri(src: Optional[str]) -> Optional[bytes]:
    """Return the bytes of a base64 data URI, or None."""
    if not src or not src.startswith("data:") or ";base64," not in src:
        return None
    try:
        return base64.b64decode(src.split(";base64,", 1)[1], validate=True)
    except (binascii.Error, ValueError):
        return None
