"""
Land pattern data model.

A pattern is a package body description plus a list of pads. Pads either carry
their own pad stack or reference a shared pad template by uid. Pad stacks hold
geometry per layer; generator output is attached as polygon geometry.

Example::

    from padgen.pads import DShapePad
    from padgen.pattern import TerminalShape, new_qfn_pattern, pad_stack_from_dshape

    pattern = new_qfn_pattern("QFN-28_5x5")
    stack = pad_stack_from_dshape(DShapePad())
    template = pattern.add_pad_template("D-shape", TerminalShape.DSHAPE, pad_stack=stack)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .pads import DShapePad, ThermalTab

__all__ = [
    "MaskStateOption",
    "PackageType",
    "Pad",
    "PadProperties",
    "PadStack",
    "PadTemplate",
    "PasteStateOption",
    "Pattern",
    "PatternGeometry",
    "PatternGeometryType",
    "PatternProperties",
    "PinModification",
    "TerminalShape",
    "new_qfn_pattern",
    "pad_stack_from_dshape",
    "pad_stack_from_thermal_tab",
    "renumber_pins",
]


class PatternGeometryType(Enum):
    """Kind of primitive stored in a pad stack layer."""

    LINE = 1
    RECT = 2
    ELLIPSE = 3
    POLYGON = 9


class PackageType(Enum):
    QFN = "QFN"
    LQFP = "LQFP"


class TerminalShape(Enum):
    DSHAPE = "d"
    RECT = "r"
    CIRCULAR = "c"
    OBLONG = "b"  # oval
    IRREGULAR = "u"


class MaskStateOption(Enum):
    COMMON = 1
    OPEN = 2
    TENTED = 3


class PasteStateOption(Enum):
    COMMON = 1
    SOLDER = 2
    NO_SOLDER = 3


class PinModification(Enum):
    NONE = 1
    DELETED = 2
    HIDDEN = 3


@dataclass
class PatternGeometry:
    """One primitive; ``data`` holds its parameters (e.g. ``points`` for polygons)."""

    type: PatternGeometryType
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.name.lower(), "data": dict(self.data)}


# Layer attribute -> external name
LAYER_NAMES = {
    "top": "top",
    "top_paste": "topPaste",
    "top_mask": "topMask",
    "top_silk": "topSilk",
    "top_assembly": "topAssembly",
    "top_keepout": "topKeepout",
    "bottom": "bottom",
    "bottom_paste": "bottomPaste",
    "bottom_mask": "bottomMask",
    "bottom_silk": "bottomSilk",
    "bottom_assembly": "bottomAssembly",
    "bottom_keepout": "bottomKeepout",
}


@dataclass
class PadStack:
    """Geometry of a pad on every layer."""

    top: list[PatternGeometry] = field(default_factory=list)
    top_paste: list[PatternGeometry] = field(default_factory=list)
    top_mask: list[PatternGeometry] = field(default_factory=list)
    top_silk: list[PatternGeometry] = field(default_factory=list)
    top_assembly: list[PatternGeometry] = field(default_factory=list)
    top_keepout: list[PatternGeometry] = field(default_factory=list)
    bottom: list[PatternGeometry] = field(default_factory=list)
    bottom_paste: list[PatternGeometry] = field(default_factory=list)
    bottom_mask: list[PatternGeometry] = field(default_factory=list)
    bottom_silk: list[PatternGeometry] = field(default_factory=list)
    bottom_assembly: list[PatternGeometry] = field(default_factory=list)
    bottom_keepout: list[PatternGeometry] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(getattr(self, attr) for attr in LAYER_NAMES)

    def to_dict(self) -> dict[str, Any]:
        return {
            name: [geom.to_dict() for geom in getattr(self, attr)]
            for attr, name in LAYER_NAMES.items()
        }


@dataclass
class PadProperties:
    """
    Pad template properties.

    ``mask_swell`` and ``paste_shrink`` are either a length in mm or ``"auto"``.
    """

    pad_width: float = 0.0  # X1
    pad_length: float = 0.0  # Y1
    top_mask_state: MaskStateOption = MaskStateOption.COMMON
    bottom_mask_state: MaskStateOption = MaskStateOption.COMMON
    top_paste_state: PasteStateOption = PasteStateOption.COMMON
    bottom_paste_state: PasteStateOption = PasteStateOption.COMMON
    mask_swell: float | str = "auto"
    paste_shrink: float | str = "auto"

    def to_dict(self) -> dict[str, Any]:
        return {
            "padWidth": self.pad_width,
            "padLength": self.pad_length,
            "topMaskState": self.top_mask_state.name.lower(),
            "bottomMaskState": self.bottom_mask_state.name.lower(),
            "topPasteState": self.top_paste_state.name.lower(),
            "bottomPasteState": self.bottom_paste_state.name.lower(),
            "maskSwell": self.mask_swell,
            "pasteShrink": self.paste_shrink,
        }


@dataclass
class PadTemplate:
    """Shared pad definition referenced by pads through ``uid``."""

    uid: int
    name: str
    shape: TerminalShape = TerminalShape.DSHAPE
    props: PadProperties = field(default_factory=PadProperties)
    pad_stack: PadStack = field(default_factory=PadStack)

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "shape": self.shape.value,
            "props": self.props.to_dict(),
            "padStack": self.pad_stack.to_dict(),
        }


@dataclass
class Pad:
    """A placed pad. Rotation is counter-clockwise, in degrees."""

    pin_number: int
    pin_mod: PinModification = PinModification.NONE
    position_x: float = 0.0
    position_y: float = 0.0
    rotation: float = 0.0
    use_template: int | None = None  # uid of a PadTemplate
    pad_stack: PadStack = field(default_factory=PadStack)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pinNumber": self.pin_number,
            "pinMod": self.pin_mod.name.lower(),
            "positionX": self.position_x,
            "positionY": self.position_y,
            "rotation": self.rotation,
            "useTemplate": self.use_template,
            "padStack": self.pad_stack.to_dict(),
        }


@dataclass
class PatternProperties:
    """Package dimensions (mm)."""

    body_length: float = 5.0  # D, horizontal
    body_width: float = 5.0  # E, vertical
    term_length: float = 0.55  # L
    term_width: float = 0.24  # b
    term_shape: TerminalShape = TerminalShape.DSHAPE
    body_height: float | None = None
    pitch: float | None = 0.5  # e
    pin_count: int | None = 28  # excluding the thermal pad
    jt: float = 0.4  # toe
    jh: float = 0.05  # heel
    js: float = 0.0  # side

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "bodyLength": self.body_length,
            "bodyWidth": self.body_width,
            "termLength": self.term_length,
            "termWidth": self.term_width,
            "termShape": self.term_shape.value,
            "pitch": self.pitch,
            "pinCount": self.pin_count,
            "JT": self.jt,
            "JH": self.jh,
            "JS": self.js,
        }
        if self.body_height is not None:
            data["bodyHeight"] = self.body_height
        return data


@dataclass
class Pattern:
    """A land pattern: metadata, package dimensions, pads and pad templates."""

    name: str = "Untitled"
    ref_des: str = "U"
    value: str = ""
    datasheet_url: str = ""
    model_url: str = ""
    package_type: PackageType = PackageType.QFN
    props: PatternProperties = field(default_factory=PatternProperties)
    pads: list[Pad] = field(default_factory=list)
    pad_templates: list[PadTemplate] = field(default_factory=list)

    def add_pad_template(
        self,
        name: str,
        shape: TerminalShape = TerminalShape.DSHAPE,
        props: PadProperties | None = None,
        pad_stack: PadStack | None = None,
    ) -> PadTemplate:
        """Append a template with the next free uid."""
        uid = max((t.uid for t in self.pad_templates), default=0) + 1
        template = PadTemplate(
            uid=uid,
            name=name,
            shape=shape,
            props=props or PadProperties(),
            pad_stack=pad_stack or PadStack(),
        )
        self.pad_templates.append(template)
        return template

    def get_pad_template(self, uid: int) -> PadTemplate | None:
        for template in self.pad_templates:
            if template.uid == uid:
                return template
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "refDes": self.ref_des,
            "value": self.value,
            "datasheetUrl": self.datasheet_url,
            "modelUrl": self.model_url,
            "packageType": self.package_type.value,
            "props": self.props.to_dict(),
            "pads": [pad.to_dict() for pad in self.pads],
            "padTemplates": [t.to_dict() for t in self.pad_templates],
        }


def new_qfn_pattern(name: Any = None) -> Pattern:
    """
    Create a new QFN pattern with default package dimensions.

    Args:
        name: Pattern name; anything that is not a string gives "Untitled"

    Returns:
        Pattern with no pads and no templates
    """
    return Pattern(
        name=name if isinstance(name, str) else "Untitled",
        package_type=PackageType.QFN,
        props=PatternProperties(),
    )


def renumber_pins(pattern: Pattern, start: int = 1) -> Pattern:
    """
    Number the pads consecutively from ``start`` in list order.

    Deleted pads are skipped and keep their old number; hidden pads are
    numbered like visible ones.

    Returns:
        The same pattern, modified in place
    """
    number = start
    for pad in pattern.pads:
        if pad.pin_mod == PinModification.DELETED:
            continue
        pad.pin_number = number
        number += 1
    return pattern


def _polygons(segments: list[tuple[float, ...]]) -> list[PatternGeometry]:
    return [
        PatternGeometry(PatternGeometryType.POLYGON, {"points": list(seg)}) for seg in segments
    ]


def pad_stack_from_dshape(pad: DShapePad) -> PadStack:
    """Pad stack holding a D-shape pad's copper, mask and paste outlines."""
    return PadStack(
        top=_polygons([pad.pad]),
        top_mask=_polygons([pad.solder_mask]),
        top_paste=_polygons([pad.paste_mask]),
    )


def pad_stack_from_thermal_tab(tab: ThermalTab) -> PadStack:
    """
    Pad stack holding a thermal tab.

    The copper is the bare pad rectangle; the mask and paste layers hold one
    polygon per generated contour.
    """
    x = tab.props.pad_length / 2
    y = tab.props.pad_width / 2
    copper = (x, y, x, -y, -x, -y, -x, y)
    return PadStack(
        top=_polygons([copper]),
        top_mask=_polygons(tab.solder_masks),
        top_paste=_polygons(tab.paste_masks),
    )
