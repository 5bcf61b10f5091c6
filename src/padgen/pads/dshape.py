"""
D-shape terminal pad generator.

Builds the copper outline, solder-mask opening and paste aperture of one
QFN-style terminal pad. The heel end is a half circle; the toe end gets small
rounded corners, or a flat edge when there is no toe extension.

Local frame: the toe end sits at ``x = -pad_toe`` (``x = 0`` for a flat end),
the heel end at ``x = term_length + pad_heel``, and the pad is centred on
``y = 0``. Outlines start at the top of the heel arc and run clockwise.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..geometry import ARC_RESOLUTION, Segment, arc, arc_divisions, area, concat, mirror_v
from .props import read_number, snap

logger = logging.getLogger(__name__)

__all__ = ["DShapeAreas", "DShapePad", "DShapeProps", "PROP_NAMES"]

MAX_PAD_RADIUS = 0.25  # maximum toe corner radius
MIN_RADIUS = 0.06  # minimum paste corner radius

# External (camelCase) property name -> DShapeProps attribute
PROP_NAMES = {
    "termLength": "term_length",
    "termWidth": "term_width",
    "padToe": "pad_toe",
    "padHeel": "pad_heel",
    "padSide": "pad_side",
    "maskSwell": "mask_swell",
    "pasteShrink": "paste_shrink",
}


@dataclass
class DShapeProps:
    """Dimensions of a D-shape pad (mm)."""

    term_length: float = 0.55
    term_width: float = 0.24
    pad_toe: float = 0.4  # JT
    pad_heel: float = 0.05  # JH
    pad_side: float = 0.0  # JS
    mask_swell: float = 0.08  # ~3mil
    paste_shrink: float = 0.08  # ~3mil

    @property
    def top_edge(self) -> float:
        """Half height of the copper pad."""
        return self.term_width / 2 - self.pad_side


@dataclass(frozen=True)
class DShapeAreas:
    """Areas of the three outlines (mm^2)."""

    pad: float
    solder_mask: float
    paste_mask: float


class DShapePad:
    """
    D-shape pad stack generator.

    Example::

        pad = DShapePad()
        pad.set_props({"termLength": 0.55, "termWidth": 0.24, "padToe": 0})
        outline = pad.get_pad()
    """

    def __init__(self, props: Mapping[str, Any] | None = None):
        self.props = DShapeProps()
        self.pad: Segment = ()
        self.solder_mask: Segment = ()
        self.paste_mask: Segment = ()
        self.set_props(props or {})

    def set_props(self, props: Mapping[str, Any]) -> dict[str, float]:
        """
        Validate and store pad properties, then regenerate the outlines.

        Absent keys keep their current value. Out of range values are clamped
        and unparsable values ignored; this never raises.

        Returns:
            The validated properties (see get_props)
        """
        p = self.props
        term_length = snap(read_number(props, "termLength", p.term_length, 0.1, 10), 0.001)
        pad_toe = snap(read_number(props, "padToe", p.pad_toe, 0, 2), 0.001)
        pad_heel = snap(read_number(props, "padHeel", p.pad_heel, 0, 2), 0.001)
        # the heel half circle has to fit inside the terminal length
        max_width = min(5, 2 * (term_length + pad_heel))
        term_width = snap(read_number(props, "termWidth", p.term_width, 0.1, max_width), 0.001)
        pad_side = snap(read_number(props, "padSide", p.pad_side, 0, term_width / 4), 0.001)
        mask_swell = snap(read_number(props, "maskSwell", p.mask_swell, 0, 1), 0.001)
        # the paste heel arc keeps at least one chord of radius
        top_edge = term_width / 2 - pad_side
        paste_shrink = snap(
            read_number(props, "pasteShrink", p.paste_shrink, 0, top_edge - ARC_RESOLUTION), 0.001
        )

        self.props = DShapeProps(
            term_length=term_length,
            term_width=term_width,
            pad_toe=pad_toe,
            pad_heel=pad_heel,
            pad_side=pad_side,
            mask_swell=mask_swell,
            paste_shrink=paste_shrink,
        )
        self.update()
        return self.get_props()

    def get_props(self) -> dict[str, float]:
        """Current properties keyed by their external names."""
        return {key: getattr(self.props, attr) for key, attr in PROP_NAMES.items()}

    def update(self) -> None:
        """Regenerate pad, solder mask and paste outlines."""
        self.pad = self._outline(0.0)
        self.solder_mask = self._outline(self.props.mask_swell)
        self.paste_mask = self._outline(-self.props.paste_shrink)

    def get_pad(self) -> Segment:
        return self.pad

    def get_solder_mask(self) -> Segment:
        return self.solder_mask

    def get_paste_mask(self) -> Segment:
        return self.paste_mask

    def get_areas(self) -> DShapeAreas:
        return DShapeAreas(
            pad=area(self.pad),
            solder_mask=area(self.solder_mask),
            paste_mask=area(self.paste_mask),
        )

    def _outline(self, delta: float) -> Segment:
        """
        Build one outline grown by ``delta`` (negative to shrink).

        The pad and mask share the copper corner centres, so the mask corner is
        an exact offset of the copper corner. The paste aperture gets its own,
        smaller corner radius and falls back to a straight toe edge when that
        radius no longer fits.
        """
        p = self.props
        top_edge = p.top_edge
        left_edge = p.pad_toe
        radius = top_edge + delta

        # heel end: half circle from +90 to -90 degrees
        division = arc_divisions(math.pi, radius)
        heel_cx = p.term_length + p.pad_heel - top_edge
        outline = arc(heel_cx, 0, radius, math.pi / 2, -math.pi / division, division + 1)

        if left_edge <= 0:
            x = 0.0 - delta
            return concat(outline, (x, -radius, x, radius))

        if delta >= 0:
            r1 = min(top_edge * 0.5, MAX_PAD_RADIUS, left_edge)
            corner = _corner_arc(-(left_edge - r1), -(top_edge - r1), r1 + delta)
        else:
            t = top_edge + delta
            l = left_edge + delta
            r2 = max(t * 0.5, MIN_RADIUS)
            if t <= r2:
                logger.debug("Paste corner radius %.3f does not fit, using a flat toe", r2)
                return concat(outline, (-l, -t, -l, t))
            corner = _corner_arc(-l + r2, -t + r2, r2)

        return concat(outline, corner, mirror_v(corner))


def _corner_arc(cx: float, cy: float, radius: float) -> Segment:
    """Lower toe corner, from -90 to -180 degrees."""
    division = arc_divisions(0.5 * math.pi, radius)
    return arc(cx, cy, radius, -math.pi / 2, -0.5 * math.pi / division, division + 1)
