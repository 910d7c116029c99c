# src/panelgrid/layout/frame.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from panelgrid.errors import ConfigError

__all__ = [
    "Side",
    "SideMode",
    "FrameSides",
    "NO_FRAME",
    "X_SIDE_TOKENS",
    "Y_SIDE_TOKENS",
]

# Tokens controlling the S/N sides (x-axis) and W/E sides (y-axis)
X_SIDE_TOKENS = "SsNnbt"
Y_SIDE_TOKENS = "WwEelr"
NO_FRAME = "+n"


class Side(str, Enum):
    WEST = "W"
    EAST = "E"
    SOUTH = "S"
    NORTH = "N"


class SideMode(int, Enum):
    """What is drawn on one frame side, ordered by how much room it takes."""
    NONE = 0
    LINE = 1
    TICK = 2
    ANNOTATE = 3


# line-only tokens per side
_LINE_TOKEN: Dict[Side, str] = {Side.WEST: "l", Side.EAST: "r", Side.SOUTH: "b", Side.NORTH: "t"}
_TOKEN_SIDE: Dict[str, Tuple[Side, SideMode]] = {}
for _side, _line in _LINE_TOKEN.items():
    _TOKEN_SIDE[_side.value] = (_side, SideMode.ANNOTATE)
    _TOKEN_SIDE[_side.value.lower()] = (_side, SideMode.TICK)
    _TOKEN_SIDE[_line] = (_side, SideMode.LINE)


def side_token(side: Side, mode: SideMode) -> str:
    if mode is SideMode.ANNOTATE:
        return side.value
    if mode is SideMode.TICK:
        return side.value.lower()
    if mode is SideMode.LINE:
        return _LINE_TOKEN[side]
    return ""


@dataclass(frozen=True)
class FrameSides:
    """
    Per-panel frame setting.

    Serialized as the compact frame code used by -B: west/east tokens first,
    then north/south, e.g. "WeNs" or "lrSt". `no_frame` panels serialize as "+n".
    `extra` carries frame modifiers (e.g. "+gred") appended to the code.
    """
    west: SideMode = SideMode.NONE
    east: SideMode = SideMode.NONE
    south: SideMode = SideMode.NONE
    north: SideMode = SideMode.NONE
    no_frame: bool = False
    extra: str = ""

    def mode(self, side: Side) -> SideMode:
        return {
            Side.WEST: self.west,
            Side.EAST: self.east,
            Side.SOUTH: self.south,
            Side.NORTH: self.north,
        }[side]

    def annotated(self, side: Side) -> bool:
        return self.mode(side) is SideMode.ANNOTATE

    def sides_code(self) -> str:
        return (
            side_token(Side.WEST, self.west)
            + side_token(Side.EAST, self.east)
            + side_token(Side.NORTH, self.north)
            + side_token(Side.SOUTH, self.south)
        )

    def code(self) -> str:
        if self.no_frame:
            return NO_FRAME
        sides = self.sides_code()
        if not sides:
            return NO_FRAME + self.extra
        return sides + self.extra

    @classmethod
    def from_code(cls, code: str) -> FrameSides:
        if code.startswith(NO_FRAME) and code[len(NO_FRAME):] == "":
            return cls(no_frame=True)
        head, plus, mods = code.partition("+")
        extra = plus + mods
        if head == "" and extra.startswith(NO_FRAME):
            # a panel without sides but with modifiers
            return cls(extra=extra[len(NO_FRAME):])
        modes: Dict[Side, SideMode] = {}
        for ch in head:
            if ch not in _TOKEN_SIDE:
                raise ConfigError(f"invalid frame token '{ch}' in '{code}'")
            side, mode = _TOKEN_SIDE[ch]
            modes[side] = max(modes.get(side, SideMode.NONE), mode)
        return cls(
            west=modes.get(Side.WEST, SideMode.NONE),
            east=modes.get(Side.EAST, SideMode.NONE),
            south=modes.get(Side.SOUTH, SideMode.NONE),
            north=modes.get(Side.NORTH, SideMode.NONE),
            extra=extra,
        )
