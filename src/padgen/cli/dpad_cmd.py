"""
D-shape pad command for padgen CLI.

Usage:
    padgen dpad --term-length 0.4 --term-width 0.25 --pad-toe 0
    padgen dpad --format json --geometry
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from padgen.config import Config
from padgen.pads.dshape import PROP_NAMES, DShapePad
from padgen.units import format_area, format_length

from .utils import parse_overrides

# CLI option dest -> property name
OPTION_PROPS = {
    "term_length": "termLength",
    "term_width": "termWidth",
    "pad_toe": "padToe",
    "pad_heel": "padHeel",
    "pad_side": "padSide",
    "mask_swell": "maskSwell",
    "paste_shrink": "pasteShrink",
}

_LABELS = {
    "termLength": "Terminal length",
    "termWidth": "Terminal width",
    "padToe": "Toe (JT)",
    "padHeel": "Heel (JH)",
    "padSide": "Side (JS)",
    "maskSwell": "Mask swell",
    "pasteShrink": "Paste shrink",
}


def add_arguments(parser) -> None:
    """Register D-shape pad options on a subparser."""
    parser.add_argument("--term-length", type=float, help="Terminal length L (mm)")
    parser.add_argument("--term-width", type=float, help="Terminal width b (mm)")
    parser.add_argument("--pad-toe", type=float, help="Toe extension JT (mm)")
    parser.add_argument("--pad-heel", type=float, help="Heel extension JH (mm)")
    parser.add_argument("--pad-side", type=float, help="Side reduction JS (mm)")
    parser.add_argument("--mask-swell", type=float, help="Solder mask expansion (mm)")
    parser.add_argument("--paste-shrink", type=float, help="Paste reduction (mm)")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set any property by name, e.g. --set padToe=0",
    )
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument("--geometry", action="store_true", help="Include outlines (json)")


def build_props(args, config: Config) -> dict[str, Any]:
    """Merge config defaults, named options and --set overrides, in that order."""
    props = config.dshape_pad.as_props()
    for dest, key in OPTION_PROPS.items():
        value = getattr(args, dest, None)
        if value is not None:
            props[key] = value
    props.update(parse_overrides(args.overrides, PROP_NAMES, "dpad"))
    return props


def run_dpad(args, config: Config) -> int:
    """Handle the dpad command."""
    pad = DShapePad(build_props(args, config))
    output_format = args.format or config.defaults.format

    if output_format == "json":
        print(json.dumps(to_json(pad, args.geometry), indent=2))
    else:
        _output_table(pad)
    return 0


def to_json(pad: DShapePad, geometry: bool = False) -> dict[str, Any]:
    areas = pad.get_areas()
    data: dict[str, Any] = {
        "props": pad.get_props(),
        "areas": {
            "pad": areas.pad,
            "solderMask": areas.solder_mask,
            "pasteMask": areas.paste_mask,
        },
    }
    if geometry:
        data["geometry"] = {
            "pad": list(pad.pad),
            "solderMask": list(pad.solder_mask),
            "pasteMask": list(pad.paste_mask),
        }
    return data


def _output_table(pad: DShapePad) -> None:
    console = Console()
    props = pad.get_props()
    areas = pad.get_areas()

    table = Table(title="D-Shape Pad", show_header=False)
    table.add_column("Property", style="dim")
    table.add_column("Value")
    for key, label in _LABELS.items():
        table.add_row(label, format_length(props[key]))
    table.add_section()
    table.add_row("Pad area", format_area(areas.pad))
    table.add_row("Mask area", format_area(areas.solder_mask))
    table.add_row("Paste area", format_area(areas.paste_mask))
    console.print(table)
