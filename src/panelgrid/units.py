# src/panelgrid/units.py
from __future__ import annotations
import re
from typing import List, Optional

from panelgrid.errors import ConfigError

__all__ = [
    "POINTS_PER_INCH",
    "CM_PER_INCH",
    "UNITS",
    "to_inch",
    "parse_lengths",
    "parse_numbers",
]

POINTS_PER_INCH = 72.0
CM_PER_INCH = 2.54

# inches per unit
UNITS = {
    "c": 1.0 / CM_PER_INCH,
    "i": 1.0,
    "p": 1.0 / POINTS_PER_INCH,
}

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([cip]?)\s*$")


def to_inch(text: str | float, default_unit: str = "c", *, option: Optional[str] = None) -> float:
    """
    Convert a length like '8c', '2.5i', '12p' or '3' to inches.
    Bare numbers (and floats) are in `default_unit`.
    """
    if default_unit not in UNITS:
        raise ConfigError(f"unknown length unit '{default_unit}' (use c, i or p)", option)
    if isinstance(text, (int, float)):
        return float(text) * UNITS[default_unit]
    m = _LENGTH_RE.match(text)
    if m is None:
        raise ConfigError(f"cannot parse length '{text}'", option)
    value = float(m.group(1))
    unit = m.group(2) or default_unit
    return value * UNITS[unit]


def _split(text: str) -> List[str]:
    return [tok for tok in re.split(r"[,/]", text) if tok != ""]


def parse_lengths(text: str, default_unit: str = "c", *, option: Optional[str] = None) -> List[float]:
    """Parse a comma- or slash-separated list of lengths into inches."""
    items = _split(text)
    if not items:
        raise ConfigError("no values given", option)
    return [to_inch(tok, default_unit, option=option) for tok in items]


def parse_numbers(text: str, *, option: Optional[str] = None) -> List[float]:
    """Parse a comma-separated list of plain numbers (e.g., relative weights)."""
    items = [tok for tok in text.split(",") if tok != ""]
    if not items:
        raise ConfigError("no values given", option)
    out: List[float] = []
    for tok in items:
        try:
            out.append(float(tok))
        except ValueError:
            raise ConfigError(f"'{tok}' is not a number", option) from None
    return out
