"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
import traceback
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from padgen.exceptions import PadgenError, ValidationError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "get_error_console", "parse_overrides", "print_error"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output (stderr)."""
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception, with Rich markup on a terminal and plain text otherwise.

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, PadgenError):
        console.print(f"[bold red]Error:[/bold red] {e}", markup=True, highlight=False)
    else:
        print(format_error(e), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, PadgenError):
        return f"Error: {e}"

    return f"Error: {type(e).__name__}: {e}"


def parse_overrides(
    pairs: Iterable[str], prop_names: Mapping[str, str], generator: str
) -> dict[str, Any]:
    """
    Parse ``KEY=VALUE`` property overrides.

    Keys are the camelCase property names. Values are passed through as
    strings; the generator parses and clamps them.

    Raises:
        ValidationError: If any pair is malformed or names an unknown property
    """
    props: dict[str, Any] = {}
    errors = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            errors.append(f"Expected KEY=VALUE, got '{pair}'")
        elif key not in prop_names:
            errors.append(f"Unknown property '{key}'")
        else:
            props[key] = value.strip()

    if errors:
        raise ValidationError(
            errors,
            context={"generator": generator},
            suggestions=[f"Known properties: {', '.join(prop_names)}"],
        )
    return props
