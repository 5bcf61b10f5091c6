"""
Command-line interface for padgen.

    padgen thermal [options]       - Thermal tab via grid, masks and coverage
    padgen dpad [options]          - D-shape terminal pad outlines and areas
    padgen pattern qfn             - Default QFN pattern as JSON
    padgen config                  - Show or initialise configuration

Examples:
    padgen thermal --pad-length 4.1 --pad-width 4.1 --via-layout grid
    padgen thermal --tenting --format json --geometry
    padgen -v thermal --set viaDiameter=0.35 --units mils
    padgen dpad --term-length 0.4 --pad-toe 0
    padgen pattern qfn --name QFN-28_5x5
    padgen config --show
"""

import argparse
from typing import List, Optional

from padgen import __version__
from padgen.exceptions import PadgenError

from .utils import print_error

__all__ = ["main"]


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for padgen CLI."""
    parser = argparse.ArgumentParser(
        prog="padgen",
        description="PCB land pattern geometry generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"padgen {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from . import dpad_cmd, thermal_cmd

    # Thermal subcommand
    thermal_parser = subparsers.add_parser("thermal", help="Generate a thermal tab")
    thermal_cmd.add_arguments(thermal_parser)
    thermal_parser.add_argument("--units", choices=["mm", "mils"], help="Display units")

    # D-shape pad subcommand
    dpad_parser = subparsers.add_parser("dpad", help="Generate a D-shape pad")
    dpad_cmd.add_arguments(dpad_parser)
    dpad_parser.add_argument("--units", choices=["mm", "mils"], help="Display units")

    # Pattern subcommand
    pattern_parser = subparsers.add_parser("pattern", help="Pattern templates")
    pattern_subparsers = pattern_parser.add_subparsers(
        dest="pattern_command", help="Pattern commands"
    )
    qfn_parser = pattern_subparsers.add_parser("qfn", help="New QFN pattern")
    qfn_parser.add_argument("--name", help="Pattern name (default: Untitled)")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument("--show", action="store_true", help="Show effective config")
    config_group.add_argument("--template", action="store_true", help="Print a config template")
    config_group.add_argument("--init", action="store_true", help="Create a config file")
    config_group.add_argument("--paths", action="store_true", help="Show config file paths")
    config_parser.add_argument("--user", action="store_true", help="Use user config for --init")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return _dispatch(args)
    except PadgenError as e:
        print_error(e, verbose=False)
        return 1


def _dispatch(args) -> int:
    if args.command == "config":
        from .config_cmd import main as config_main

        sub_argv = []
        for flag in ("show", "template", "init", "paths", "user"):
            if getattr(args, flag):
                sub_argv.append(f"--{flag}")
        return config_main(sub_argv)

    from padgen.config import Config
    from padgen.logging import enable_verbose
    from padgen.units import get_unit_formatter, set_current_formatter

    config = Config.load()
    if args.verbose or config.defaults.verbose:
        enable_verbose("DEBUG")

    if args.command == "pattern":
        from .pattern_cmd import run_pattern

        return run_pattern(args)

    set_current_formatter(get_unit_formatter(args.units, config))

    if args.command == "thermal":
        from .thermal_cmd import run_thermal

        return run_thermal(args, config)

    elif args.command == "dpad":
        from .dpad_cmd import run_dpad

        return run_dpad(args, config)

    return 1
