# src/panelgrid/config.py
"""
Style settings and configuration file handling.

The style settings are the read-only plotting parameters (font sizes, tick
length, offsets, frame type, frame axes) that the layout engine needs to size
ticks, annotations, labels and titles. They are captured once per `begin` as an
immutable `StyleSettings` and never consulted again mid-computation.

Config file location (first match wins):
  1. $PANELGRID_CONFIG
  2. Linux:   $XDG_CONFIG_HOME/panelgrid/config.toml or ~/.config/panelgrid/config.toml
     macOS:   ~/Library/Application Support/panelgrid/config.toml
     Windows: %APPDATA%/panelgrid/config.toml

Example::

    [style]
    font_annot = "10p"
    tick_length = "4p"
    frame_type = "fancy"
    frame_axes = "WSen"
    length_unit = "c"

    [session]
    dir = "/tmp/my-figures"
"""
from __future__ import annotations
import os
import sys
import tempfile
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

try:  # pragma: no cover - Python >=3.11
    import tomllib  # type: ignore
except Exception:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from panelgrid.errors import ConfigError
from panelgrid.units import POINTS_PER_INCH, UNITS, to_inch

__all__ = [
    "StyleSettings",
    "PanelgridConfig",
    "FRAME_TYPES",
    "AUTO_FRAME_AXES",
    "load_config",
    "resolve_session_dir",
]

FRAME_TYPES = ("fancy", "plain", "inside", "graph")
AUTO_FRAME_AXES = "WrStZ"

# Cap height of a letter relative to its font size
LETTER_HEIGHT = 0.736

# Style keys that are font sizes (points) vs. lengths (inches)
_FONT_KEYS = ("font_annot", "font_label", "font_title", "font_heading", "font_tag")
_LENGTH_KEYS = ("tick_length", "annot_offset", "label_offset", "title_offset", "heading_offset")


def _pt(value: float) -> float:
    return value / POINTS_PER_INCH


@dataclass(frozen=True)
class StyleSettings:
    """
    Snapshot of the plotting style needed for layout.

    Font sizes are in points; all other lengths are in inches.
    """
    font_annot: float = 12.0
    font_label: float = 16.0
    font_title: float = 24.0
    font_heading: float = 32.0
    font_tag: float = 20.0
    tick_length: float = field(default_factory=lambda: _pt(5.0))
    annot_offset: float = field(default_factory=lambda: _pt(5.0))
    label_offset: float = field(default_factory=lambda: _pt(8.0))
    title_offset: float = field(default_factory=lambda: _pt(14.0))
    heading_offset: float = field(default_factory=lambda: _pt(18.0))
    frame_type: str = "fancy"
    frame_axes: str = "auto"
    length_unit: str = "c"

    def __post_init__(self) -> None:
        if self.frame_type not in FRAME_TYPES:
            raise ConfigError(
                f"frame_type must be one of {', '.join(FRAME_TYPES)}; got '{self.frame_type}'"
            )
        if self.length_unit not in UNITS:
            raise ConfigError(f"length_unit must be c, i or p; got '{self.length_unit}'")
        for key in _FONT_KEYS:
            if getattr(self, key) <= 0.0:
                raise ConfigError(f"{key} must be positive")

    @property
    def inside(self) -> bool:
        return self.frame_type == "inside"

    def letter_height(self, font_size: float) -> float:
        """Height in inches of capital letters at `font_size` points."""
        return LETTER_HEIGHT * font_size / POINTS_PER_INCH

    def resolved_frame_axes(self) -> str:
        return AUTO_FRAME_AXES if self.frame_axes == "auto" else self.frame_axes

    @classmethod
    def from_mapping(cls, table: Dict[str, Any]) -> StyleSettings:
        """Build settings from a [style] table; lengths accept unit strings ('5p', '0.2c')."""
        known = {f.name for f in fields(cls)}
        unknown = set(table) - known
        if unknown:
            raise ConfigError(f"[style] has unknown keys: {sorted(unknown)}")
        unit = table.get("length_unit", "c")
        if not isinstance(unit, str):
            raise ConfigError("[style].length_unit must be a string")
        kwargs: Dict[str, Any] = {}
        for key, value in table.items():
            if key in _FONT_KEYS:
                # fonts are points unless a unit is given
                if isinstance(value, (int, float)):
                    kwargs[key] = float(value)
                elif isinstance(value, str):
                    kwargs[key] = to_inch(value, "p", option=f"[style].{key}") * POINTS_PER_INCH
                else:
                    raise ConfigError(f"[style].{key} must be a number or a length string")
            elif key in _LENGTH_KEYS:
                if not isinstance(value, (int, float, str)):
                    raise ConfigError(f"[style].{key} must be a number or a length string")
                kwargs[key] = to_inch(value, unit, option=f"[style].{key}")
            else:
                if not isinstance(value, str):
                    raise ConfigError(f"[style].{key} must be a string")
                kwargs[key] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class PanelgridConfig:
    """Loaded configuration: style settings plus an optional session directory."""
    style: StyleSettings = field(default_factory=StyleSettings)
    session_dir: Optional[Path] = None
    source: Optional[Path] = None


def _get_config_path() -> Path:
    override = os.environ.get("PANELGRID_CONFIG")
    if override:
        return Path(override).expanduser().resolve()

    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
    return (base / "panelgrid" / "config.toml").resolve()


def load_config(path: Optional[Path | str] = None) -> PanelgridConfig:
    """
    Load the TOML configuration. A missing file yields the defaults.

    Raises:
        ConfigError: if the file is not valid TOML or has invalid values.
    """
    cfg_path = Path(path).expanduser().resolve() if path is not None else _get_config_path()
    if not cfg_path.exists():
        return PanelgridConfig()

    try:
        with open(cfg_path, "rb") as fh:
            data = tomllib.load(fh)
    except Exception as exc:
        raise ConfigError(f"Failed to load config {cfg_path}: {exc}") from exc

    style_tbl = data.get("style", {})
    if not isinstance(style_tbl, dict):
        raise ConfigError("[style] must be a table")
    session_tbl = data.get("session", {})
    if not isinstance(session_tbl, dict):
        raise ConfigError("[session] must be a table")

    session_dir = session_tbl.get("dir")
    if session_dir is not None and not isinstance(session_dir, str):
        raise ConfigError("[session].dir must be a string")

    return PanelgridConfig(
        style=StyleSettings.from_mapping(style_tbl),
        session_dir=Path(session_dir).expanduser() if session_dir else None,
        source=cfg_path,
    )


def resolve_session_dir(config: Optional[PanelgridConfig] = None) -> Path:
    """
    Session working directory for state files:
    $PANELGRID_SESSION_DIR, else [session].dir, else <tempdir>/panelgrid-session.
    """
    env = os.environ.get("PANELGRID_SESSION_DIR")
    if env:
        return Path(env).expanduser()
    if config is not None and config.session_dir is not None:
        return config.session_dir
    return Path(tempfile.gettempdir()) / "panelgrid-session"
