"""
Segment algebra for pad outlines.

A segment is an immutable flat tuple of coordinates ``(x1, y1, x2, y2, ...)``
describing one closed contour; the closing edge from the last point back to the
first is implicit. Generated contours are ordered clockwise, so a transformed
piece can be concatenated with its untransformed neighbours without reversing
the winding. That lets the pad generators build one canonical arc and derive
every other orientation by mirroring instead of recomputing it.

Mirroring and reflecting flip the winding, so those transforms also reverse the
point order. Rotation and translation keep it.
"""

from __future__ import annotations

import math

import numpy as np

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

Segment = tuple[float, ...]

# Target chord length (mm) between two points on an arc.
#   0.02mm ~ 0.8mil
# step angle = ARC_RESOLUTION / r, so larger radii get more points
ARC_RESOLUTION = 0.02

# Generated coordinates are rounded to 0.0001mm
COORD_DECIMALS = 4


def _as_points(seg: Segment) -> np.ndarray:
    return np.asarray(seg, dtype=float).reshape(-1, 2)


def _as_segment(pts: np.ndarray) -> Segment:
    return tuple(pts.ravel().tolist())


def arc(
    cx: float,
    cy: float,
    radius: float,
    start_angle: float,
    step_angle: float,
    steps: int,
) -> Segment:
    """
    Create an arc segment.

    Args:
        cx: X position of the centre
        cy: Y position of the centre
        radius: Arc radius
        start_angle: Angle of the first point (radians)
        step_angle: Angle increment between points (negative for clockwise)
        steps: Number of points to generate

    Returns:
        Segment with ``steps`` points, rounded to ``COORD_DECIMALS``
    """
    angles = start_angle + step_angle * np.arange(steps)
    xs = np.round(cx + radius * np.cos(angles), COORD_DECIMALS)
    ys = np.round(cy + radius * np.sin(angles), COORD_DECIMALS)
    return _as_segment(np.column_stack((xs, ys)))


def arc_divisions(sweep: float, radius: float) -> int:
    """Number of chords needed to sweep ``sweep`` radians at ``radius``."""
    return max(1, abs(math.floor(sweep * radius / ARC_RESOLUTION)))


def mirror_h(seg: Segment) -> Segment:
    """
    Mirror horizontally about the local Y axis.

    [x1, y1, ..., xn, yn] => [-xn, yn, ..., -x1, y1]
    """
    return _as_segment(_as_points(seg)[::-1] * (-1.0, 1.0))


def mirror_v(seg: Segment) -> Segment:
    """
    Mirror vertically about the local X axis.

    [x1, y1, ..., xn, yn] => [xn, -yn, ..., x1, -y1]
    """
    return _as_segment(_as_points(seg)[::-1] * (1.0, -1.0))


def rotate_180(seg: Segment) -> Segment:
    """
    Rotate by 180 degrees about the local origin.

    [x1, y1, ..., xn, yn] => [-x1, -y1, ..., -xn, -yn]
    """
    return _as_segment(-_as_points(seg))


def reflect_45(seg: Segment) -> Segment:
    """
    Reflect across the 45 degree line.

    [x1, y1, ..., xn, yn] => [yn, xn, ..., y1, x1]
    """
    return _as_segment(_as_points(seg)[::-1, ::-1])


def translate(seg: Segment, dx: float, dy: float) -> Segment:
    """Offset every point of a segment by (dx, dy)."""
    return _as_segment(_as_points(seg) + (dx, dy))


def area(seg: Segment) -> float:
    """
    Unsigned area of a polygon (shoelace formula).

    The polyline must not be explicitly closed; the edge from the last point
    back to the first is included automatically.
    """
    pts = _as_points(seg)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    twice = np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)
    return abs(float(twice)) / 2


def concat(*segments: Segment) -> Segment:
    """Join pieces, in order, into one contour."""
    return tuple(value for seg in segments for value in seg)


def points(seg: Segment) -> list[tuple[float, float]]:
    """View a segment as a list of (x, y) pairs."""
    return list(zip(seg[0::2], seg[1::2]))
