"""
Logging switch for padgen.

Every padgen module logs through ``logging.getLogger(__name__)``, so all
records propagate to the ``padgen`` logger configured here. It is silent by
default.
"""

import logging

_logger = logging.getLogger("padgen")
_logger.addHandler(logging.NullHandler())  # Default: no output


def enable_verbose(level: str = "INFO", format: str | None = None) -> None:
    """Enable verbose logging.

    Clamped properties and via layout downgrades are reported at DEBUG.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        enable_verbose("DEBUG")

        tab = ThermalTab({"viaDiameter": 999})  # logs the clamp

        disable_verbose()
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))

    if format is None:
        format = "[%(levelname)s] %(name)s: %(message)s"

    handler.setFormatter(logging.Formatter(format))
    _logger.addHandler(handler)


def disable_verbose() -> None:
    """Disable verbose logging."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)
