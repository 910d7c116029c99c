# src/panelgrid/layout/tags.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from panelgrid.errors import ConfigError

__all__ = [
    "Numbering",
    "TagMode",
    "TagSpec",
    "tag_index",
    "to_roman",
    "parse_justify",
    "flip_justify",
]


class Numbering(Enum):
    """Order in which panels are numbered (tags) and visited (cursor)."""
    ROW = 0
    COLUMN = 1


class TagMode(Enum):
    LETTER = "letter"
    NUMBER = "number"


_ROMAN = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def to_roman(value: int, *, lower: bool = False) -> str:
    """Subtractive Roman numeral for 1 <= value <= 3999."""
    if not 1 <= value <= 3999:
        raise ConfigError(f"cannot write {value} as a Roman numeral", "-A")
    out = []
    for amount, glyph in _ROMAN:
        count, value = divmod(value, amount)
        out.append(glyph * count)
    text = "".join(out)
    return text.lower() if lower else text


_HORIZONTAL = "LCR"
_VERTICAL = "BMT"


def parse_justify(code: str) -> Tuple[str, str]:
    """Split a two-letter justification code ('TL', 'BR', 'CM', ...) into (horizontal, vertical)."""
    up = code.upper()
    if len(up) == 2:
        a, b = up
        if a in _HORIZONTAL and b in _VERTICAL:
            return a, b
        if a in _VERTICAL and b in _HORIZONTAL:
            return b, a
    raise ConfigError(f"invalid justification '{code}' (use e.g. TL, BR, MC)", "-A")


def flip_justify(code: str) -> str:
    """Mirror a justification through the centre: TL -> RB, ML -> RM."""
    h, v = parse_justify(code)
    h = {"L": "R", "R": "L"}.get(h, h)
    v = {"B": "T", "T": "B"}.get(v, v)
    return h + v


def tag_index(row: int, col: int, rows: int, columns: int, numbering: Numbering) -> int:
    if numbering is Numbering.COLUMN:
        return col * rows + row
    return row * columns + col


@dataclass(frozen=True)
class TagSpec:
    """
    Automatic panel tagging (-A).

    The tag of panel k is `prefix + placeholder(k) + suffix`, where the
    placeholder is the start letter advanced by k, the start number plus k, or
    that number as a Roman numeral.

    Attributes:
        prefix, suffix: literal text around the placeholder
        mode: letter or number tags
        start_letter: first letter [a]
        start_number: first number [1]
        roman: None, "lower" or "upper"
        numbering: row-major or column-major tag order
        placement: reference point on the panel [TL]
        justify: tag text justification at the reference point [TL]
        offset: (dx, dy) inches from the reference point (None = from tag font)
        clearance: (x, y) inches around the tag text (None = from tag font)
        fill, pen: tag box fill and outline ("-" = none)
        shade: drop-shadow fill ("-" = none)
        shade_offset: (dx, dy) inches of the drop shadow
    """
    prefix: str = ""
    suffix: str = ")"
    mode: TagMode = TagMode.LETTER
    start_letter: str = "a"
    start_number: int = 1
    roman: Optional[str] = None
    numbering: Numbering = Numbering.ROW
    placement: str = "TL"
    justify: str = "TL"
    offset: Optional[Tuple[float, float]] = None
    clearance: Optional[Tuple[float, float]] = None
    fill: str = "-"
    pen: str = "-"
    shade: str = "-"
    shade_offset: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        if self.roman not in (None, "lower", "upper"):
            raise ConfigError(f"roman must be 'lower' or 'upper'; got '{self.roman}'", "-A")
        if self.roman is not None and self.mode is TagMode.LETTER:
            raise ConfigError("Cannot select Roman numerals AND letters!", "-A")
        if self.mode is TagMode.LETTER and len(self.start_letter) != 1:
            raise ConfigError(f"start letter must be a single character; got '{self.start_letter}'", "-A")

    def placeholder(self, k: int) -> str:
        if self.mode is TagMode.LETTER:
            return chr(ord(self.start_letter) + k)
        if self.roman is not None:
            return to_roman(self.start_number + k, lower=self.roman == "lower")
        return str(self.start_number + k)

    def text(self, k: int) -> str:
        return f"{self.prefix}{self.placeholder(k)}{self.suffix}"

    def text_for(self, row: int, col: int, rows: int, columns: int) -> str:
        return self.text(tag_index(row, col, rows, columns, self.numbering))
