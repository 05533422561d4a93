"""Geometry engine: unit conversions and affine matrices."""

from deckmodel.engine.affine import (
    AffineMatrix,
    apply_to_point,
    apply_to_rect,
    compose,
    identity,
    rotate_about_point,
    scale,
    translate,
)
from deckmodel.engine.units import EMU_PER_PX, emu_to_px, px_to_emu

__all__ = [
    "AffineMatrix",
    "EMU_PER_PX",
    "apply_to_point",
    "apply_to_rect",
    "compose",
    "emu_to_px",
    "identity",
    "px_to_emu",
    "rotate_about_point",
    "scale",
    "translate",
]
