"""PPTX Renderer module - writes a PresentationDocument back to PowerPoint.

Renders documents to PPTX files including:
- Slide size, solid and image backgrounds, speaker notes
- Text boxes with paragraphs, bullets and run formatting
- Pictures with crop, or grey placeholders when bytes are missing
- Preset auto shapes and connectors with fill and stroke
- Groups, rotation and flips
"""

from deckmodel.renderer.pptx_writer import PPTXWriter
from deckmodel.renderer.shape_renderer import ShapeRenderer
from deckmodel.renderer.style_renderer import StyleRenderer
from deckmodel.renderer.text_renderer import TextRenderer

__all__ = [
    "PPTXWriter",
    "ShapeRenderer",
    "StyleRenderer",
    "TextRenderer",
]
