# tests/unit/test_frame.py
from __future__ import annotations

import pytest

from panelgrid.errors import ConfigError
from panelgrid.layout.frame import FrameSides, Side, SideMode


def test_code_orders_west_east_north_south():
    sides = FrameSides(
        west=SideMode.ANNOTATE, east=SideMode.TICK, south=SideMode.TICK, north=SideMode.ANNOTATE
    )
    assert sides.code() == "WeNs"


def test_line_only_tokens():
    sides = FrameSides(west=SideMode.LINE, east=SideMode.LINE, south=SideMode.LINE, north=SideMode.LINE)
    assert sides.code() == "lrtb"


def test_from_code_parses_modes():
    sides = FrameSides.from_code("WeNs")
    assert sides.mode(Side.WEST) is SideMode.ANNOTATE
    assert sides.mode(Side.EAST) is SideMode.TICK
    assert sides.annotated(Side.NORTH)
    assert not sides.annotated(Side.SOUTH)
    assert not sides.no_frame


def test_from_code_keeps_modifiers():
    sides = FrameSides.from_code("WS+gred")
    assert sides.extra == "+gred"
    assert sides.code() == "WS+gred"


def test_no_frame_code():
    assert FrameSides(no_frame=True).code() == "+n"
    assert FrameSides.from_code("+n") == FrameSides(no_frame=True)


def test_sideless_frame_with_modifiers_round_trips():
    sides = FrameSides(extra="+gred")
    assert sides.code() == "+n+gred"
    assert FrameSides.from_code(sides.code()) == sides


def test_stronger_token_wins_for_one_side():
    assert FrameSides.from_code("Ss").south is SideMode.ANNOTATE


def test_invalid_token():
    with pytest.raises(ConfigError, match="invalid frame token 'Q'"):
        FrameSides.from_code("WQ")
