"""
Geometry primitives for pad outline generation.

Usage:
    from padgen.geometry import arc, mirror_v, concat

    corner = arc(0, 0, 0.06, math.pi / 2, -math.pi / 10, 6)
    outline = concat(corner, mirror_v(corner))
"""

from .segment import (
    ARC_RESOLUTION,
    COORD_DECIMALS,
    Segment,
    arc,
    arc_divisions,
    area,
    concat,
    mirror_h,
    mirror_v,
    points,
    reflect_45,
    rotate_180,
    translate,
)

__all__ = [
    "ARC_RESOLUTION",
    "COORD_DECIMALS",
    "Segment",
    "arc",
    "arc_divisions",
    "area",
    "concat",
    "mirror_h",
    "mirror_v",
    "points",
    "reflect_45",
    "rotate_180",
    "translate",
]
