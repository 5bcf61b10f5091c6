"""
Config command for padgen CLI.

Usage:
    padgen config --show          Show effective configuration with sources
    padgen config --template      Print a commented template config
    padgen config --init          Create template config file
    padgen config --paths         Show config file paths
"""

import argparse
import sys
from dataclasses import fields
from pathlib import Path

from padgen.config import (
    CONFIG_FILENAMES,
    USER_CONFIG_PATH,
    Config,
    ConfigError,
    generate_template,
    get_config_paths,
)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for config command."""
    parser = argparse.ArgumentParser(
        prog="padgen config",
        description="Manage padgen configuration",
    )

    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show",
        action="store_true",
        help="Show effective configuration with sources",
    )
    action_group.add_argument(
        "--template",
        action="store_true",
        help="Print a template config file",
    )
    action_group.add_argument(
        "--init",
        action="store_true",
        help="Create template config file in current directory",
    )
    action_group.add_argument(
        "--paths",
        action="store_true",
        help="Show config file paths",
    )
    parser.add_argument(
        "--user",
        action="store_true",
        help="Use user config (~/.config/padgen/config.toml) for --init",
    )

    args = parser.parse_args(argv)

    try:
        if args.template:
            print(generate_template(), end="")
            return 0
        elif args.init:
            return _init_config(args.user)
        elif args.paths:
            return _show_paths()
        else:
            # Default to showing config
            return _show_config()

    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective padgen configuration")

    for section in ("defaults", "display", "thermal_tab", "dshape_pad"):
        section_obj = getattr(config, section)
        print()
        print(f"[{section}]")
        for f in fields(section_obj):
            _print_value(
                f.name, getattr(section_obj, f.name), config.get_source(f"{section}.{f.name}")
            )

    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    if source != "default":
        # Show just filename for brevity
        source_display = Path(source).name
    else:
        source_display = source

    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {USER_CONFIG_PATH}")
    if paths["user"]:
        print("  Status: exists")
    else:
        print("  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")

    return 0


def _init_config(user: bool = False) -> int:
    """Create a template config file."""
    if user:
        target = USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]  # .padgen.toml

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config template: {target}")
    print()
    print("Uncomment and modify values as needed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
