"""
Exception hierarchy for padgen.

The geometry generators never raise for bad property values; they clamp or
ignore them. These exceptions cover the surfaces around the core: config
files, command line input and pattern data.

All exceptions carry:
- Context information (file paths, offending keys, etc.)
- Suggestions for how to fix the issue

Example::

    from padgen.exceptions import ValidationError

    raise ValidationError(
        ["Unknown property 'padLen'"],
        context={"generator": "thermal"},
        suggestions=["Known properties: padLength, padWidth"],
    )
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class PadgenError(Exception):
    """
    Base exception for all padgen errors.

    Attributes:
        context: Dictionary of contextual information (file, key, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ValidationError(PadgenError):
    """
    Input validation failed with one or more errors.

    Collects every problem instead of stopping at the first one.

    Attributes:
        errors: List of individual validation error messages
    """

    def __init__(
        self,
        errors: List[str],
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.errors = errors
        message = f"Validation failed with {len(errors)} error(s):\n"
        message += "\n".join(f"  {i + 1}. {e}" for i, e in enumerate(errors))
        super().__init__(message, context, suggestions)


class ConfigurationError(PadgenError):
    """
    Configuration or settings error.

    Raised when a config file cannot be read or holds invalid values.

    Example::

        raise ConfigurationError(
            "Invalid TOML in config file",
            context={"file": "padgen.toml"},
            suggestions=["Run 'padgen config --template' for a valid example"],
        )
    """

    pass
