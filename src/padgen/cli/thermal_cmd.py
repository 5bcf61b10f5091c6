"""
Thermal tab command for padgen CLI.

Prints the validated thermal tab properties, the derived via grid and the
solder coverage of the exposed pad.

Usage:
    padgen thermal --pad-length 4.1 --pad-width 4.1
    padgen thermal --via-layout grid --tenting --format json --geometry
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from rich.console import Console
from rich.table import Table

from padgen.config import Config
from padgen.pads.thermal_tab import PROP_NAMES, ThermalTab
from padgen.units import format_area, format_length, format_ratio, get_current_formatter

from .utils import parse_overrides

# CLI option dest -> property name
OPTION_PROPS = {
    "pad_length": "padLength",
    "pad_width": "padWidth",
    "pitch_h": "viaPitchH",
    "pitch_v": "viaPitchV",
    "via_diameter": "viaDiameter",
    "ring_width": "viaRingWidth",
    "mask_swell": "maskSwell",
    "paste_shrink": "pasteShrink",
    "paste_spacing": "pasteSpacing",
    "via_layout": "viaLayout",
    "tenting": "viaTenting",
}

_LENGTH_LABELS = {
    "padLength": "Pad length",
    "padWidth": "Pad width",
    "viaPitchH": "Via pitch H",
    "viaPitchV": "Via pitch V",
    "viaDiameter": "Via diameter",
    "viaRingWidth": "Via ring width",
    "maskSwell": "Mask swell",
    "pasteShrink": "Paste shrink",
    "pasteSpacing": "Paste spacing",
}


def add_arguments(parser) -> None:
    """Register thermal tab options on a subparser."""
    parser.add_argument("--pad-length", type=float, help="Exposed pad length D2 (mm)")
    parser.add_argument("--pad-width", type=float, help="Exposed pad width E2 (mm)")
    parser.add_argument("--pitch-h", type=float, help="Horizontal via pitch (mm)")
    parser.add_argument("--pitch-v", type=float, help="Vertical via pitch (mm)")
    parser.add_argument("--via-diameter", type=float, help="Via hole diameter (mm)")
    parser.add_argument("--ring-width", type=float, help="Via anti-pad ring width (mm)")
    parser.add_argument("--mask-swell", type=float, help="Solder mask expansion (mm)")
    parser.add_argument("--paste-shrink", type=float, help="Paste reduction (mm)")
    parser.add_argument("--paste-spacing", type=float, help="Gap between paste apertures (mm)")
    parser.add_argument("--via-layout", choices=["dense", "grid"], help="Via packing")
    parser.add_argument(
        "--tenting",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Cover vias with solder mask",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set any property by name, e.g. --set viaRingWidth=0.1",
    )
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument(
        "--geometry", action="store_true", help="Include outlines and via positions (json)"
    )


def build_props(args, config: Config) -> dict[str, Any]:
    """Merge config defaults, named options and --set overrides, in that order."""
    props = config.thermal_tab.as_props()
    for dest, key in OPTION_PROPS.items():
        value = getattr(args, dest, None)
        if value is not None:
            props[key] = value
    props.update(parse_overrides(args.overrides, PROP_NAMES, "thermal"))
    return props


def run_thermal(args, config: Config) -> int:
    """Handle the thermal command."""
    tab = ThermalTab(build_props(args, config))
    output_format = args.format or config.defaults.format

    if output_format == "json":
        print(json.dumps(to_json(tab, args.geometry), indent=2))
    else:
        _output_table(tab)
    return 0


def to_json(tab: ThermalTab, geometry: bool = False) -> dict[str, Any]:
    layout = tab.layout
    data: dict[str, Any] = {
        "props": tab.get_props(),
        "layout": {
            "effectiveLayout": layout.effective_layout.value,
            "columns": layout.col_count,
            "rows": layout.row_count,
            "viaCount": layout.via_count,
            "viaPosX": layout.via_pos_x,
            "viaPosY": layout.via_pos_y,
            "minViaPitch": layout.min_via_pitch,
            "maxPasteSpacing": layout.max_paste_spacing,
            "pasteMargin": layout.paste_margin,
        },
        "coverage": tab.get_coverage().to_dict(),
    }
    if geometry:
        data["geometry"] = {
            "solderMasks": [list(seg) for seg in tab.solder_masks],
            "pasteMasks": [list(seg) for seg in tab.paste_masks],
            "viaPositions": [list(pos) for pos in tab.get_via_positions()],
        }
    return data


def _output_table(tab: ThermalTab) -> None:
    console = Console()
    props = tab.get_props()
    layout = tab.layout
    coverage = tab.get_coverage()

    props_table = Table(title="Thermal Tab", show_header=False)
    props_table.add_column("Property", style="dim")
    props_table.add_column("Value")
    for key, label in _LENGTH_LABELS.items():
        props_table.add_row(label, format_length(props[key]))
    props_table.add_row("Via tenting", "yes" if props["viaTenting"] else "no")
    props_table.add_row("Via layout", props["viaLayout"])
    console.print(props_table)
    console.print()

    layout_table = Table(title="Via Grid", show_header=False)
    layout_table.add_column("Metric", style="dim")
    layout_table.add_column("Value")
    effective = layout.effective_layout.value
    if effective != props["viaLayout"]:
        effective = f"[yellow]{effective}[/yellow]"
    layout_table.add_row("Effective layout", effective)
    layout_table.add_row("Vias", f"{layout.col_count} x {layout.row_count}")
    layout_table.add_row(
        "Top-right via",
        get_current_formatter().format_coordinate(layout.via_pos_x, layout.via_pos_y),
    )
    layout_table.add_row("Min via pitch", format_length(layout.min_via_pitch))
    layout_table.add_row("Max paste spacing", format_length(layout.max_paste_spacing))
    layout_table.add_row("Paste apertures", str(len(tab.paste_masks)))
    console.print(layout_table)
    console.print()

    coverage_table = Table(title="Coverage", show_header=False)
    coverage_table.add_column("Metric", style="dim")
    coverage_table.add_column("Value")
    coverage_table.add_row("Pad area", format_area(coverage.pad_area))
    coverage_table.add_row("SMD area", format_area(coverage.smd_area))
    coverage_table.add_row("Paste area", format_area(coverage.paste_area))
    coverage_table.add_row("Paste / pad", format_ratio(coverage.paste_pad_ratio))
    coverage_table.add_row("Paste / SMD", format_ratio(coverage.paste_smd_ratio))
    console.print(coverage_table)
