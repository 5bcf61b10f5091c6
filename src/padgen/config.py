"""
Configuration file support for padgen.

Provides hierarchical configuration loading from:
1. Project config: .padgen.toml or padgen.toml in project root
2. User config: ~/.config/padgen/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError
from .pads.dshape import PROP_NAMES as DSHAPE_PROP_NAMES
from .pads.thermal_tab import PROP_NAMES as THERMAL_TAB_PROP_NAMES

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

# Config file names to search for in project directories
CONFIG_FILENAMES = [".padgen.toml", "padgen.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "padgen" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "verbose"},
    "display": {"units", "precision_mm", "precision_mils"},
    "thermal_tab": set(THERMAL_TAB_PROP_NAMES.values()),
    "dshape_pad": set(DSHAPE_PROP_NAMES.values()),
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    verbose: bool = False


@dataclass
class DisplayConfig:
    """How lengths and areas are printed."""

    units: str | None = None
    precision_mm: int = 3
    precision_mils: int = 1


@dataclass
class ThermalTabConfig:
    """Thermal tab property overrides; None keeps the generator default."""

    pad_length: float | None = None
    pad_width: float | None = None
    via_pitch_h: float | None = None
    via_pitch_v: float | None = None
    via_ring_width: float | None = None
    via_diameter: float | None = None
    mask_swell: float | None = None
    paste_shrink: float | None = None
    paste_spacing: float | None = None
    via_tenting: bool | None = None
    via_layout: str | None = None

    def as_props(self) -> dict[str, Any]:
        """Overrides as a camelCase property bag for ThermalTab.set_props."""
        return _as_props(self, THERMAL_TAB_PROP_NAMES)


@dataclass
class DShapePadConfig:
    """D-shape pad property overrides; None keeps the generator default."""

    term_length: float | None = None
    term_width: float | None = None
    pad_toe: float | None = None
    pad_heel: float | None = None
    pad_side: float | None = None
    mask_swell: float | None = None
    paste_shrink: float | None = None

    def as_props(self) -> dict[str, Any]:
        """Overrides as a camelCase property bag for DShapePad.set_props."""
        return _as_props(self, DSHAPE_PROP_NAMES)


def _as_props(section: Any, prop_names: dict[str, str]) -> dict[str, Any]:
    props = {}
    for key, attr in prop_names.items():
        value = getattr(section, attr)
        if value is not None:
            props[key] = value
    return props


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    thermal_tab: ThermalTabConfig = field(default_factory=ThermalTabConfig)
    dshape_pad: DShapePadConfig = field(default_factory=DShapePadConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            if user_data:
                _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


class ConfigError(ConfigurationError):
    """Config file could not be read or parsed."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        # Stop at filesystem root
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any] | None:
    """
    Load a TOML file.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML data, or None when no TOML parser is available

    Raises:
        ConfigError: If the file is unreadable or not valid TOML
    """
    if tomllib is None:
        warnings.warn(
            "tomli package not installed. Config file support requires 'pip install tomli' for Python < 3.11.",
            stacklevel=2,
        )
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(
            f"Invalid TOML in {path}: {e}",
            context={"file": str(path)},
            suggestions=["Run 'padgen config --template' for a valid example"],
        ) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", context={"file": str(path)}) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    # Warn about unknown top-level keys
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section in KNOWN_KEYS:
        if section not in data:
            continue
        section_data = data[section]
        if not isinstance(section_data, dict):
            raise ConfigError(
                f"Config section '{section}' must be a table",
                context={"file": source, "got": type(section_data).__name__},
            )
        _warn_unknown_keys(section_data, KNOWN_KEYS[section], section, source)

        target = getattr(config, section)
        for f in fields(target):
            if f.name in section_data:
                setattr(target, f.name, section_data[f.name])
                sources[f"{section}.{f.name}"] = source


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# padgen configuration file
# Place as .padgen.toml in project root or ~/.config/padgen/config.toml for user defaults

[defaults]
# Output format: table, json
# format = "table"

# Enable verbose (debug) logging by default
# verbose = false

[display]
# Display units: mm, mils (PADGEN_UNITS and --units take precedence)
# units = "mm"

# Decimal places for millimetre values
# precision_mm = 3

# Decimal places for mil values
# precision_mils = 1

[thermal_tab]
# Exposed pad size in mm (D2 x E2)
# pad_length = 3.15
# pad_width = 3.15

# Via grid pitch in mm, raised to the minimum pitch when too small
# via_pitch_h = 1.0
# via_pitch_v = 1.0

# Via hole diameter and anti-pad ring width in mm
# via_diameter = 0.3
# via_ring_width = 0.08

# Cover vias with solder mask
# via_tenting = false

# Via layout: dense, grid
# via_layout = "dense"

# Mask expansion, paste reduction and spacing between paste apertures in mm
# mask_swell = 0.08
# paste_shrink = 0.08
# paste_spacing = 0.25

[dshape_pad]
# Terminal length and width in mm
# term_length = 0.55
# term_width = 0.24

# Toe, heel and side fillet goals in mm
# pad_toe = 0.4
# pad_heel = 0.05
# pad_side = 0.0

# Mask expansion and paste reduction in mm
# mask_swell = 0.08
# paste_shrink = 0.08
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
