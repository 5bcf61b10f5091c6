"""
Pattern command for padgen CLI.

Usage:
    padgen pattern qfn --name QFN-28_5x5
"""

from __future__ import annotations

import json

from padgen.pattern import new_qfn_pattern


def run_pattern(args) -> int:
    """Handle pattern subcommands."""
    if args.pattern_command == "qfn":
        pattern = new_qfn_pattern(args.name)
        print(json.dumps(pattern.to_dict(), indent=2))
        return 0

    print("Usage: padgen pattern <command> [options]")
    print("Commands: qfn")
    return 1
