"""
Thermal tab (exposed pad) generator.

Builds the solder-mask openings and the tiled solder-paste mosaic of a large
centre pad perforated by a rectangular grid of thermal vias.

Two via layouts are supported:

- grid: vias sit far enough from the pad edge that every paste tile keeps a
  rounded corner between the via keep-out and the pad edge.
- dense: vias are packed using only their own diameter as the edge margin.
  Tiles along the pad boundary then use bows truncated by the pad edge. When
  the dense packing happens to leave the full grid margin anyway, the
  effective layout silently becomes grid.

All polylines start at the top-right and run clockwise. Paste tiles are built
around the top-right reference via and moved into place by translation and
mirroring, so each tile family is computed once.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..geometry import (
    ARC_RESOLUTION,
    Segment,
    arc,
    arc_divisions,
    area,
    concat,
    mirror_h,
    mirror_v,
    reflect_45,
    rotate_180,
    translate,
)
from .props import read_flag, read_number, snap, snap_up

logger = logging.getLogger(__name__)

__all__ = [
    "CORNER_RADIUS",
    "CoverageMetrics",
    "PROP_NAMES",
    "ThermalTab",
    "ThermalTabLayout",
    "ThermalTabProps",
    "ViaLayout",
]

CORNER_RADIUS = 0.06  # radius of rounded paste corners

MIN_PAD_SIZE = 1
MAX_PAD_SIZE = 100
MIN_MASK_SWELL = 0  # 0 allowed for solder-mask-defined pads
MAX_MASK_SWELL = 1
MIN_PASTE_SHRINK = 0
MAX_PASTE_SHRINK = 0.5
MIN_PASTE_SPACING = 0  # the maximum is derived from the via keep-out
MIN_VIA_DIA = 0.1
MAX_VIA_DIA = 0.5
MIN_VIA_RING_W = 0.015
MAX_VIA_RING_W = 1
MIN_VIA_PITCH = 0.1

SIN_40 = 0.64

# External (camelCase) property name -> ThermalTabProps attribute
PROP_NAMES = {
    "padLength": "pad_length",
    "padWidth": "pad_width",
    "viaPitchH": "via_pitch_h",
    "viaPitchV": "via_pitch_v",
    "viaRingWidth": "via_ring_width",
    "viaDiameter": "via_diameter",
    "maskSwell": "mask_swell",
    "pasteShrink": "paste_shrink",
    "pasteSpacing": "paste_spacing",
    "viaTenting": "via_tenting",
    "viaLayout": "via_layout",
}


class ViaLayout(Enum):
    """Thermal via packing strategy."""

    GRID = "grid"
    DENSE = "dense"

    @classmethod
    def from_string(cls, value: Any) -> ViaLayout | None:
        """Parse a layout name, returning None when it is not recognised."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass
class ThermalTabProps:
    """User-facing thermal tab properties (mm)."""

    pad_length: float = 3.15  # D2, horizontal
    pad_width: float = 3.15  # E2, vertical
    via_pitch_h: float = 1.0
    via_pitch_v: float = 1.0
    via_ring_width: float = 0.08  # width of the via anti-pad
    via_diameter: float = 0.3  # hole diameter
    via_tenting: bool = False
    mask_swell: float = 0.08  # ~3mil
    paste_shrink: float = 0.08  # ~3mil
    paste_spacing: float = 0.25  # spacing between stencil apertures
    via_layout: ViaLayout = ViaLayout.DENSE

    @property
    def keepout_radius(self) -> float:
        """Radius of the area around a via that takes no paste."""
        ring = self.via_ring_width if self.via_tenting else 0.0
        return self.via_diameter / 2 + ring + self.paste_shrink


@dataclass(frozen=True)
class ThermalTabLayout:
    """Via grid derived from the current properties."""

    effective_layout: ViaLayout = ViaLayout.GRID
    col_count: int = 3
    row_count: int = 3
    via_pos_x: float = 1.0  # X position of the top-right via
    via_pos_y: float = 1.0  # Y position of the top-right via
    min_via_pitch: float = 0.5
    max_paste_spacing: float = 0.31
    paste_margin: float = 0.0

    @property
    def via_count(self) -> int:
        return self.col_count * self.row_count


@dataclass(frozen=True)
class CoverageMetrics:
    """Solder coverage of the exposed pad (areas in mm^2)."""

    pad_area: float
    smd_area: float
    paste_area: float
    paste_pad_ratio: float
    paste_smd_ratio: float

    def to_dict(self) -> dict[str, float]:
        return {
            "padArea": self.pad_area,
            "smdArea": self.smd_area,
            "pasteArea": self.paste_area,
            "pastePadRatio": self.paste_pad_ratio,
            "pasteSmdRatio": self.paste_smd_ratio,
        }


def _asin(ratio: float) -> float:
    return math.asin(min(1.0, max(-1.0, ratio)))


class ThermalTab:
    """
    Thermal tab pad stack generator.

    Example::

        tab = ThermalTab()
        tab.set_props({"padLength": 4.1, "padWidth": 4.1, "viaLayout": "grid"})
        masks = tab.solder_masks
        paste = tab.paste_masks
        print(tab.get_coverage().paste_pad_ratio)
    """

    def __init__(self, props: Mapping[str, Any] | None = None):
        self.props = ThermalTabProps()
        self.layout = ThermalTabLayout()
        self.solder_masks: list[Segment] = []
        self.paste_mask_templates: list[Segment] = []
        self.paste_masks: list[Segment] = []
        self.set_props(props or {})

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_props(self) -> dict[str, Any]:
        """Current properties keyed by their external names."""
        values = {key: getattr(self.props, attr) for key, attr in PROP_NAMES.items()}
        values["viaLayout"] = self.props.via_layout.value
        return values

    def set_props(self, props: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate and store properties, recompute the via grid and outlines.

        Absent keys keep their current value. Numbers are clamped into range,
        unparsable values and unknown layout names are ignored; this never
        raises.

        Returns:
            The validated properties (see get_props)
        """
        p = self.props

        pad_length = snap(
            read_number(props, "padLength", p.pad_length, MIN_PAD_SIZE, MAX_PAD_SIZE), 0.01
        )
        pad_width = snap(
            read_number(props, "padWidth", p.pad_width, MIN_PAD_SIZE, MAX_PAD_SIZE), 0.01
        )
        mask_swell = snap(
            read_number(props, "maskSwell", p.mask_swell, MIN_MASK_SWELL, MAX_MASK_SWELL), 0.001
        )
        paste_shrink = snap(
            read_number(
                props, "pasteShrink", p.paste_shrink, MIN_PASTE_SHRINK, MAX_PASTE_SHRINK
            ),
            0.001,
        )
        via_diameter = snap(
            read_number(props, "viaDiameter", p.via_diameter, MIN_VIA_DIA, MAX_VIA_DIA), 0.01
        )
        via_ring_width = snap(
            read_number(
                props, "viaRingWidth", p.via_ring_width, MIN_VIA_RING_W, MAX_VIA_RING_W
            ),
            0.001,
        )
        via_tenting = read_flag(props, "viaTenting", p.via_tenting)

        via_layout = p.via_layout
        if "viaLayout" in props:
            parsed = ViaLayout.from_string(props["viaLayout"])
            if parsed is None:
                logger.debug("Ignoring unknown via layout %r", props["viaLayout"])
            else:
                via_layout = parsed

        # distance from the via centre to the centre of a bow tip arc
        ring = via_ring_width if via_tenting else 0.0
        hyp = via_diameter / 2 + ring + paste_shrink + CORNER_RADIUS
        max_paste_spacing = snap(2 * (SIN_40 * hyp) - CORNER_RADIUS, 0.01)
        paste_spacing = snap(
            read_number(
                props, "pasteSpacing", p.paste_spacing, MIN_PASTE_SPACING, max_paste_spacing
            ),
            0.01,
        )
        opp = paste_spacing / 2 + CORNER_RADIUS
        adj = math.sqrt(max(hyp * hyp - opp * opp, 0.0))

        # smallest pitch that keeps two neighbouring bows apart, on the 0.1mm grid
        min_via_pitch = math.ceil((ARC_RESOLUTION + 2 * adj) * 10) / 10
        margin = 2 * (paste_shrink + CORNER_RADIUS + ARC_RESOLUTION + adj)

        # one via with a well formed paste tile must always fit
        min_pad = snap_up(margin, 0.01)
        if pad_length < min_pad or pad_width < min_pad:
            logger.debug("Raising pad size to %.2f to fit the paste margin", min_pad)
        pad_length = max(pad_length, min_pad)
        pad_width = max(pad_width, min_pad)

        via_pitch_v = snap(
            read_number(props, "viaPitchV", p.via_pitch_v, MIN_VIA_PITCH, pad_width / 2), 0.1
        )
        via_pitch_h = snap(
            read_number(props, "viaPitchH", p.via_pitch_h, MIN_VIA_PITCH, pad_length / 2), 0.1
        )
        if via_pitch_v < min_via_pitch:
            logger.debug("Raising vertical via pitch %.1f to %.1f", via_pitch_v, min_via_pitch)
            via_pitch_v = min_via_pitch
        if via_pitch_h < min_via_pitch:
            logger.debug("Raising horizontal via pitch %.1f to %.1f", via_pitch_h, min_via_pitch)
            via_pitch_h = min_via_pitch

        self.props = ThermalTabProps(
            pad_length=pad_length,
            pad_width=pad_width,
            via_pitch_h=via_pitch_h,
            via_pitch_v=via_pitch_v,
            via_ring_width=via_ring_width,
            via_diameter=via_diameter,
            via_tenting=via_tenting,
            mask_swell=mask_swell,
            paste_shrink=paste_shrink,
            paste_spacing=paste_spacing,
            via_layout=via_layout,
        )
        self.layout = self._compute_layout(min_via_pitch, max_paste_spacing, margin)
        self.update()
        return self.get_props()

    def _compute_layout(
        self, min_via_pitch: float, max_paste_spacing: float, margin: float
    ) -> ThermalTabLayout:
        p = self.props
        ph, pv = p.via_pitch_h, p.via_pitch_v
        length, width = p.pad_length, p.pad_width

        def grid_count(size: float, pitch: float) -> int:
            return max(1, 1 + math.floor((size - margin) / pitch))

        effective = ViaLayout.GRID
        cols = grid_count(length, ph)
        rows = grid_count(width, pv)

        if p.via_layout == ViaLayout.DENSE:
            margin2 = 2 * (p.via_diameter / 2 + p.via_ring_width)
            hdiv = max(0, math.floor((length - margin2) / ph))
            vdiv = max(0, math.floor((width - margin2) / pv))
            if (length - hdiv * ph) >= margin and (width - vdiv * pv) >= margin:
                logger.debug("Dense via packing keeps the grid margin, using grid tiles")
                cols, rows = hdiv + 1, vdiv + 1
            elif hdiv < 2 or vdiv < 2:
                # corner tiles of a dense mosaic need three vias per axis
                logger.debug(
                    "Dense via packing gives %dx%d vias, falling back to grid",
                    hdiv + 1,
                    vdiv + 1,
                )
            else:
                effective = ViaLayout.DENSE
                cols, rows = hdiv + 1, vdiv + 1

        return ThermalTabLayout(
            effective_layout=effective,
            col_count=cols,
            row_count=rows,
            via_pos_x=0.5 * (cols - 1) * ph,
            via_pos_y=0.5 * (rows - 1) * pv,
            min_via_pitch=min_via_pitch,
            max_paste_spacing=max_paste_spacing,
            paste_margin=margin,
        )

    # ------------------------------------------------------------------
    # Outlines
    # ------------------------------------------------------------------

    def update(self) -> None:
        """Regenerate solder masks and paste masks from the current state."""
        self.update_solder_masks()
        self.update_paste_masks()

    def update_solder_masks(self) -> list[Segment]:
        """
        Generate solder mask openings.

        Without tenting this is the pad grown by the mask swell. With tenting
        every via keeps a ring of mask, so the opening is split into one
        contour per gap between via rows, each scalloped around the vias.
        """
        p, lay = self.props, self.layout
        right_edge = p.pad_length / 2 + p.mask_swell
        top_edge = p.pad_width / 2 + p.mask_swell

        if not p.via_tenting:
            self.solder_masks = [
                (right_edge, top_edge, right_edge, -top_edge,
                 -right_edge, -top_edge, -right_edge, top_edge)
            ]  # fmt: skip
            return self.solder_masks

        # ◠ from 0 to 180 degrees
        arc_r = p.via_diameter / 2 + p.via_ring_width
        division = arc_divisions(math.pi, arc_r)
        arc_seg = arc(0, 0, arc_r, 0, math.pi / division, division + 1)

        # ─◠─◠─◠─ right to left
        arc_m = concat(
            *(translate(arc_seg, lay.via_pos_x - i * p.via_pitch_h, 0) for i in range(lay.col_count))
        )

        # ┌────────┐
        # └─◠─◠─◠─┘
        top_mask = concat(
            (right_edge, top_edge, right_edge, lay.via_pos_y),
            translate(arc_m, 0, lay.via_pos_y),
            (-right_edge, lay.via_pos_y, -right_edge, top_edge),
        )
        masks = [top_mask, mirror_v(top_mask)]

        # ┌─◡─◡─◡─┐
        # └─◠─◠─◠─┘
        if lay.row_count > 1:
            arc_w = mirror_v(arc_m)
            middle = concat(
                (right_edge, p.via_pitch_v, right_edge, 0),
                arc_m,
                (-right_edge, 0, -right_edge, p.via_pitch_v),
                translate(arc_w, 0, p.via_pitch_v),
            )
            for j in range(1, lay.row_count):
                masks.append(translate(middle, 0, lay.via_pos_y - j * p.via_pitch_v))

        self.solder_masks = masks
        return masks

    def update_paste_masks(self) -> list[Segment]:
        """
        Generate the paste aperture mosaic.

        Four tile templates are built around the top-right via: corner, top
        edge, interior and right edge. They are then placed at every grid cell
        by translation, with the other three corners and the opposite edges
        obtained by mirroring.
        """
        p, lay = self.props, self.layout
        ph, pv = p.via_pitch_h, p.via_pitch_v
        right_edge = p.pad_length / 2 - lay.via_pos_x - p.paste_shrink
        top_edge = p.pad_width / 2 - lay.via_pos_y - p.paste_shrink
        half_gap = p.paste_spacing / 2
        minor_r = CORNER_RADIUS
        main_r = p.keepout_radius
        hyp = minor_r + main_r

        def bow_mid(start: float, end: float) -> Segment:
            sweep = end - start
            division = arc_divisions(sweep, main_r)
            return arc(0, 0, main_r, start, sweep / division, division + 1)

        def bow_tip(start: float, end: float, cx: float, cy: float) -> Segment:
            # last point omitted so it does not duplicate the main arc
            sweep = end - start
            division = arc_divisions(sweep, minor_r)
            return arc(cx, cy, minor_r, start, sweep / division, division)

        # bow to the upper right of the via
        opp = minor_r + half_gap
        theta = _asin(opp / hyp)
        tip1 = bow_tip(-math.pi / 2, -math.pi + theta, math.cos(theta) * hyp, opp)
        tip2 = reflect_45(tip1)
        bow_ne = concat(tip1, bow_mid(theta, math.pi / 2 - theta), tip2)
        bow_nw = mirror_h(bow_ne)
        bow_sw = rotate_180(bow_ne)
        bow_se = mirror_v(bow_ne)

        # small rounded corners: 90 -> 0, 180 -> 90, 0 -> -90 degrees
        corner_div = math.ceil(0.5 * math.pi * minor_r / ARC_RESOLUTION)
        corner_ne = arc(0, 0, minor_r, math.pi / 2, -0.5 * math.pi / corner_div, corner_div + 1)
        corner_nw = mirror_h(corner_ne)
        corner_se = mirror_v(corner_ne)

        interior = concat(
            bow_sw,
            translate(bow_nw, 0, -pv),
            translate(bow_ne, -ph, -pv),
            translate(bow_se, -ph, 0),
        )

        dense = lay.effective_layout == ViaLayout.DENSE
        if dense:
            clip = corner_ne[2]  # X of the second corner point
            alpha = 0.0
            beta = 0.0
            if right_edge >= minor_r:
                cx = right_edge - minor_r
                seg = corner_ne[2:] if cx < clip else corner_ne
                arc_r = translate(seg, cx, -main_r - minor_r)
            else:
                # pad edge cuts into the via keep-out
                edge = right_edge - minor_r
                alpha = -_asin(edge / hyp)
                arc_r = bow_tip(math.pi / 2 - alpha, 0, edge, -(math.cos(alpha) * hyp))

            if top_edge >= minor_r:
                cy = top_edge - minor_r
                seg = corner_ne[:-2] if cy < clip else corner_ne
                arc_t = translate(seg, -main_r - minor_r, cy)
            else:
                edge = top_edge - minor_r
                beta = -_asin(edge / hyp)
                arc_t = bow_tip(math.pi / 2, beta, -(math.cos(beta) * hyp), edge)

            # bows along the right column, the top row and at the corner
            bow_dr = concat(
                rotate_180(tip1), bow_mid(math.pi + theta, 1.5 * math.pi - alpha), arc_r
            )
            bow_dr2 = translate(mirror_v(bow_dr), 0, -pv)
            bow_dt = concat(
                arc_t, bow_mid(math.pi + beta, 1.5 * math.pi - theta), rotate_180(tip2)
            )
            bow_dt2 = translate(mirror_h(bow_dt), -ph, 0)
            bow_dc = concat(arc_t, bow_mid(math.pi + beta, 1.5 * math.pi - alpha), arc_r)
            bow_ne2 = translate(bow_ne, -ph, -pv)

            corner = concat(bow_dc, bow_dr2, bow_ne2, bow_dt2)
            top = concat(bow_dt, translate(bow_nw, 0, -pv), bow_ne2, bow_dt2)
            right = concat(bow_dr, bow_dr2, bow_ne2, translate(bow_se, -ph, 0))
        else:
            corner = concat(
                translate(corner_ne, right_edge - minor_r, top_edge - minor_r),
                translate(corner_se, right_edge - minor_r, half_gap + minor_r),
                bow_ne,
                translate(corner_nw, half_gap + minor_r, top_edge - minor_r),
            )
            top = concat(
                translate(corner_ne, -half_gap - minor_r, top_edge - minor_r),
                bow_nw,
                translate(bow_ne, -ph, 0),
                translate(corner_nw, -ph + half_gap + minor_r, top_edge - minor_r),
            )
            right = concat(
                translate(corner_ne, right_edge - minor_r, -half_gap - minor_r),
                translate(corner_se, right_edge - minor_r, -pv + half_gap + minor_r),
                translate(bow_ne, 0, -pv),
                bow_se,
            )

        self.paste_mask_templates = [corner, top, interior, right]
        self.paste_masks = self._place_tiles(dense)
        return self.paste_masks

    def _place_tiles(self, dense: bool) -> list[Segment]:
        p, lay = self.props, self.layout
        ph, pv = p.via_pitch_h, p.via_pitch_v
        vx, vy = lay.via_pos_x, lay.via_pos_y
        corner, top, interior, right = self.paste_mask_templates

        mask = translate(corner, vx, vy)
        masks = [mask, mirror_h(mask), rotate_180(mask), mirror_v(mask)]

        # dense corner tiles already span the first cell of each edge
        start = 1 if dense else 0
        col_end = lay.col_count - 2 if dense else lay.col_count - 1
        row_end = lay.row_count - 2 if dense else lay.row_count - 1

        # top & bottom rows
        mask = translate(top, vx, vy)
        mirrored = mirror_v(mask)
        for i in range(start, col_end):
            dx = -i * ph
            masks.extend((translate(mask, dx, 0), translate(mirrored, dx, 0)))

        # left & right columns
        mask = translate(right, vx, vy)
        mirrored = mirror_h(mask)
        for j in range(start, row_end):
            dy = -j * pv
            masks.extend((translate(mask, 0, dy), translate(mirrored, 0, dy)))

        for i in range(start, col_end):
            x = vx - i * ph
            for j in range(start, row_end):
                masks.append(translate(interior, x, vy - j * pv))

        return masks

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def get_paste_area(self) -> float:
        """
        Total paste area.

        Every tile of a family is congruent, so the area is the weighted sum
        of the four template areas rather than a sum over placed tiles.
        """
        lay = self.layout
        a_corner, a_top, a_interior, a_right = (area(t) for t in self.paste_mask_templates)
        k = 3 if lay.effective_layout == ViaLayout.DENSE else 1
        cols = lay.col_count - k
        rows = lay.row_count - k
        return a_corner * 4 + a_top * cols * 2 + a_interior * cols * rows + a_right * rows * 2

    def get_via_positions(self) -> list[tuple[float, float]]:
        """Via centres, column by column starting at the top-right via."""
        p, lay = self.props, self.layout
        return [
            (lay.via_pos_x - i * p.via_pitch_h, lay.via_pos_y - j * p.via_pitch_v)
            for i in range(lay.col_count)
            for j in range(lay.row_count)
        ]

    def get_coverage(self) -> CoverageMetrics:
        """Pad, SMD and paste areas with their ratios."""
        p = self.props
        pad_area = p.pad_length * p.pad_width
        ring = p.via_ring_width if p.via_tenting else 0.0
        via_r = p.via_diameter / 2 + ring
        smd_area = pad_area - math.pi * via_r * via_r * self.layout.via_count
        paste_area = self.get_paste_area()
        return CoverageMetrics(
            pad_area=pad_area,
            smd_area=smd_area,
            paste_area=paste_area,
            paste_pad_ratio=paste_area / pad_area if pad_area > 0 else 0.0,
            paste_smd_ratio=paste_area / smd_area if smd_area > 0 else 0.0,
        )
