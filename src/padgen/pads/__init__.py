"""
Pad stack generators.

Each generator owns a set of validated properties and regenerates its copper,
solder-mask and paste outlines whenever they change.

Usage:
    from padgen.pads import DShapePad, ThermalTab

    pad = DShapePad({"termLength": 0.4, "termWidth": 0.25})
    tab = ThermalTab({"padLength": 4.1, "padWidth": 4.1, "viaTenting": True})
"""

from .dshape import DShapeAreas, DShapePad, DShapeProps
from .thermal_tab import (
    CoverageMetrics,
    ThermalTab,
    ThermalTabLayout,
    ThermalTabProps,
    ViaLayout,
)

__all__ = [
    "CoverageMetrics",
    "DShapeAreas",
    "DShapePad",
    "DShapeProps",
    "ThermalTab",
    "ThermalTabLayout",
    "ThermalTabProps",
    "ViaLayout",
]
