"""
units.py - EMU conversions.

This is the foundation module. ALL unit math uses these constants and functions.
Never hardcode EMU values anywhere else in the codebase.

EMU = English Metric Units (914400 EMUs per inch, 9525 per pixel at 96 DPI)
"""

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

EMU_PER_INCH = 914400
EMU_PER_PT = 12700
EMU_PER_PX = 9525

# Rotation in <a:xfrm rot="..."> is stored in 60,000ths of a degree
ANGLE_UNITS_PER_DEGREE = 60000

# Crop and other percentages are stored in 1000ths of a percent
PERCENT_UNITS = 100000

# Font sizes (<a:rPr sz="...">) are stored in hundredths of a point
FONT_SIZE_UNITS_PER_PT = 100


def emu_to_px(emu: float) -> float:
    """Convert EMUs to pixels (96 DPI)."""
    return emu / EMU_PER_PX


def px_to_emu(px: float) -> int:
    """Convert pixels to EMUs, rounded to the nearest whole EMU."""
    return int(round(px * EMU_PER_PX))


def emu_to_inches(emu: float) -> float:
    """Convert EMUs to inches."""
    return emu / EMU_PER_INCH


def emu_to_pt(emu: float) -> float:
    """Convert EMUs to points."""
    return emu / EMU_PER_PT


def pt_to_emu(pt: float) -> int:
    """Convert points to EMUs (for font sizes, line widths)."""
    return int(round(pt * EMU_PER_PT))


def angle_to_degrees(value: int) -> float:
    """Convert an OOXML angle to degrees."""
    return value / ANGLE_UNITS_PER_DEGREE


def degrees_to_angle(degrees: float) -> int:
    """Convert degrees to an OOXML angle."""
    return int(round(degrees * ANGLE_UNITS_PER_DEGREE))


def percent_to_fraction(value: int) -> float:
    """Convert an OOXML percentage (1000ths of a percent) to a 0..1 fraction."""
    return value / PERCENT_UNITS
