# octogrbl/units.py
"""Pixel and millimetre conversions.

Coordinates arrive from the geometry pipeline in pixels at the job resolution
(dots per inch). The controller works in millimetres.
"""

MM_PER_INCH = 25.4


def px_to_mm(px: float, resolution: float) -> float:
    """Convert pixels at ``resolution`` dpi to millimetres."""
    return px * MM_PER_INCH / resolution


def mm_to_px(mm: float, resolution: float) -> float:
    """Convert millimetres to pixels at ``resolution`` dpi."""
    return mm * resolution / MM_PER_INCH


def to_machine(px: float, resolution: float, bed_size: float, flip: bool = False) -> float:
    """Millimetre coordinate on one axis, mirrored about ``bed_size`` when flipped."""
    mm = px_to_mm(px, resolution)
    return bed_size - mm if flip else mm
