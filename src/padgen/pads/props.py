"""
Validation helpers for generator property bags.

Property bags come straight from user input (form fields, CLI flags, config
files), so every reader here is lenient: unparsable values are ignored and the
previous value kept, and numbers are clamped into range rather than rejected.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

__all__ = ["read_flag", "read_number", "snap", "snap_up"]

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _parse_float(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value):
        return None
    return value


def read_number(
    props: Mapping[str, Any],
    key: str,
    current: float,
    low: float,
    high: float,
) -> float:
    """
    Read a numeric property and clamp it to [low, high].

    Args:
        props: Incoming property bag
        key: Property name
        current: Stored value, used when the key is absent or unparsable
        low: Minimum allowed value
        high: Maximum allowed value

    Returns:
        The new value, always inside [low, high]
    """
    value = current
    if key in props:
        parsed = _parse_float(props[key])
        if parsed is None:
            logger.debug("Ignoring non-numeric %s=%r", key, props[key])
        else:
            value = parsed

    clamped = min(max(value, low), high)
    if clamped != value:
        logger.debug("Clamped %s from %s to %s", key, value, clamped)
    return clamped


def read_flag(props: Mapping[str, Any], key: str, current: bool) -> bool:
    """Read a boolean property, keeping ``current`` for unrecognised values."""
    if key not in props:
        return current
    raw = props[key]
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    logger.debug("Ignoring unrecognised %s=%r", key, raw)
    return current


def snap(value: float, step: float) -> float:
    """Round to the nearest multiple of ``step`` (halves round up)."""
    scale = round(1 / step)
    return math.floor(value * scale + 0.5) / scale


def snap_up(value: float, step: float) -> float:
    """Round up to a multiple of ``step``."""
    scale = round(1 / step)
    return math.ceil(value * scale) / scale
