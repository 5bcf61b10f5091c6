"""
Unit formatting for padgen output.

Provides configurable unit display (mm vs mils) for lengths, areas and ratios.
Supports layered configuration: CLI flag > Environment variable > Config file > Default (mm).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

__all__ = [
    "UnitSystem",
    "UnitFormatter",
    "MM_PER_MIL",
    "get_unit_formatter",
    "format_length",
    "format_area",
    "format_ratio",
]

# Conversion constant
MM_PER_MIL = 0.0254

# Environment variable for unit preference
UNITS_ENV_VAR = "PADGEN_UNITS"


class UnitSystem(Enum):
    """Unit system for display output."""

    MM = "mm"
    MILS = "mils"

    @classmethod
    def from_string(cls, value: str | None) -> UnitSystem | None:
        """Parse a unit system from a string value.

        Args:
            value: String like "mm", "mils", "mil", or None

        Returns:
            UnitSystem or None if value is None or invalid
        """
        if value is None:
            return None
        value = value.lower().strip()
        if value in ("mm", "millimeters", "millimeter"):
            return cls.MM
        if value in ("mils", "mil", "thou"):
            return cls.MILS
        return None


@dataclass
class UnitFormatter:
    """Formatter for length and area values with configurable unit system.

    All geometry in padgen is computed in mm; conversion happens only here.

    Examples:
        >>> fmt = UnitFormatter(UnitSystem.MM)
        >>> fmt.format(0.254)
        '0.254 mm'

        >>> fmt = UnitFormatter(UnitSystem.MILS)
        >>> fmt.format(0.254)
        '10.0 mils'
    """

    system: UnitSystem
    precision_mm: int = 3
    precision_mils: int = 1

    def format(self, value_mm: float, include_unit: bool = True) -> str:
        """Format a mm value in the configured unit system.

        Args:
            value_mm: Value in millimeters
            include_unit: Whether to include the unit suffix (default: True)

        Returns:
            Formatted string with value and optional unit
        """
        if self.system == UnitSystem.MILS:
            value = value_mm / MM_PER_MIL
            if include_unit:
                return f"{value:.{self.precision_mils}f} mils"
            return f"{value:.{self.precision_mils}f}"

        if include_unit:
            return f"{value_mm:.{self.precision_mm}f} mm"
        return f"{value_mm:.{self.precision_mm}f}"

    def format_area(self, value_mm2: float, include_unit: bool = True) -> str:
        """Format an area given in mm^2.

        Returns:
            Formatted string like "9.923 mm²" or "15380.9 mils²"
        """
        if self.system == UnitSystem.MILS:
            value = value_mm2 / (MM_PER_MIL * MM_PER_MIL)
            text = f"{value:.{self.precision_mils}f}"
            return f"{text} mils²" if include_unit else text

        text = f"{value_mm2:.{self.precision_mm}f}"
        return f"{text} mm²" if include_unit else text

    def format_ratio(self, ratio: float) -> str:
        """Format a ratio as a percentage, e.g. 0.5123 -> "51.2%"."""
        return f"{ratio * 100:.1f}%"

    def format_coordinate(self, x_mm: float, y_mm: float) -> str:
        """Format a coordinate pair.

        Returns:
            Formatted string like "(1.000, -0.500) mm" or "(39.4, -19.7) mils"
        """
        if self.system == UnitSystem.MILS:
            x = x_mm / MM_PER_MIL
            y = y_mm / MM_PER_MIL
            return f"({x:.{self.precision_mils}f}, {y:.{self.precision_mils}f}) mils"
        return f"({x_mm:.{self.precision_mm}f}, {y_mm:.{self.precision_mm}f}) mm"

    @property
    def unit_name(self) -> str:
        """Get the unit name for this formatter."""
        return self.system.value

    def convert_to_display(self, value_mm: float) -> float:
        """Convert a mm value to the display unit (for JSON output).

        Args:
            value_mm: Value in millimeters

        Returns:
            Value in the display unit system
        """
        if self.system == UnitSystem.MILS:
            return value_mm / MM_PER_MIL
        return value_mm


# Global formatter instance (set by CLI initialization)
_current_formatter: UnitFormatter | None = None


def get_unit_formatter(
    cli_units: str | None = None,
    config: Config | None = None,
) -> UnitFormatter:
    """Get a unit formatter based on precedence: CLI > env > config > default.

    Args:
        cli_units: Unit system from CLI flag (highest priority)
        config: Config object to read display.units from

    Returns:
        Configured UnitFormatter instance
    """
    # Priority 1: CLI argument
    system = UnitSystem.from_string(cli_units)

    # Priority 2: Environment variable
    if system is None:
        env_value = os.environ.get(UNITS_ENV_VAR)
        system = UnitSystem.from_string(env_value)

    # Priority 3: Config file
    if system is None and config is not None:
        system = UnitSystem.from_string(config.display.units)

    # Priority 4: Default to mm
    if system is None:
        system = UnitSystem.MM

    precision_mm = 3
    precision_mils = 1
    if config is not None:
        precision_mm = config.display.precision_mm
        precision_mils = config.display.precision_mils

    return UnitFormatter(
        system=system,
        precision_mm=precision_mm,
        precision_mils=precision_mils,
    )


def set_current_formatter(formatter: UnitFormatter) -> None:
    """Set the global unit formatter for the current session.

    Args:
        formatter: The UnitFormatter to use globally
    """
    global _current_formatter
    _current_formatter = formatter


def get_current_formatter() -> UnitFormatter:
    """Get the current global unit formatter.

    Returns:
        The currently configured UnitFormatter, or a default mm formatter
    """
    if _current_formatter is None:
        return UnitFormatter(UnitSystem.MM)
    return _current_formatter


# Convenience functions that use the global formatter


def format_length(value_mm: float, include_unit: bool = True) -> str:
    """Format a length value using the current unit system."""
    return get_current_formatter().format(value_mm, include_unit)


def format_area(value_mm2: float, include_unit: bool = True) -> str:
    """Format an area value using the current unit system."""
    return get_current_formatter().format_area(value_mm2, include_unit)


def format_ratio(ratio: float) -> str:
    """Format a ratio as a percentage."""
    return get_current_formatter().format_ratio(ratio)
