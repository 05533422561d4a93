"""Document model for parsed presentations."""

from deckmodel.dsl.schema import (
    Background,
    Bullet,
    BulletKind,
    Crop,
    DocumentMetadata,
    EmuRect,
    GeometryBox,
    GroupObject,
    ImageBackground,
    ImageObject,
    NoBackground,
    Paragraph,
    ParseReport,
    PresentationDocument,
    ShapeObject,
    Slide,
    SlideSize,
    SolidBackground,
    Stroke,
    TextObject,
    TextRun,
    Theme,
    ThemeColors,
    VisualObject,
)

__all__ = [
    "Background",
    "Bullet",
    "BulletKind",
    "Crop",
    "DocumentMetadata",
    "EmuRect",
    "GeometryBox",
    "GroupObject",
    "ImageBackground",
    "ImageObject",
    "NoBackground",
    "Paragraph",
    "ParseReport",
    "PresentationDocument",
    "ShapeObject",
    "Slide",
    "SlideSize",
    "SolidBackground",
    "Stroke",
    "TextObject",
    "TextRun",
    "Theme",
    "ThemeColors",
    "VisualObject",
]
