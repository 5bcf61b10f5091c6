"""
padgen: PCB land pattern geometry for surface-mount packages.

Computes pad outlines, solder-mask openings and solder-paste apertures for
QFN-style parts, including the thermal via grid under the exposed pad.

Modules:
    geometry: Segment algebra (arcs, mirroring, translation, area)
    pads: D-shape terminal pad and thermal tab generators
    pattern: Land pattern data model
    config: TOML configuration
    units: mm / mils display formatting
    cli: The ``padgen`` command

Quick Start::

    from padgen import ThermalTab

    tab = ThermalTab({"padLength": 4.1, "padWidth": 4.1, "viaLayout": "grid"})
    print(tab.layout.col_count, tab.layout.row_count)
    print(tab.get_coverage().paste_pad_ratio)
"""

__version__ = "0.1.0"

from padgen.pads import DShapePad, ThermalTab, ViaLayout
from padgen.pattern import Pattern, new_qfn_pattern, renumber_pins

__all__ = [
    "__version__",
    "DShapePad",
    "Pattern",
    "ThermalTab",
    "ViaLayout",
    "new_qfn_pattern",
    "renumber_pins",
]
