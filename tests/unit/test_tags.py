# tests/unit/test_tags.py
from __future__ import annotations

import pytest

from panelgrid.errors import ConfigError
from panelgrid.layout.tags import (
    Numbering,
    TagMode,
    TagSpec,
    flip_justify,
    parse_justify,
    tag_index,
    to_roman,
)


@pytest.mark.parametrize(
    "value, expected",
    [(1, "I"), (4, "IV"), (9, "IX"), (14, "XIV"), (40, "XL"), (1994, "MCMXCIV"), (3999, "MMMCMXCIX")],
)
def test_to_roman(value, expected):
    assert to_roman(value) == expected


def test_to_roman_lower_and_range():
    assert to_roman(12, lower=True) == "xii"
    with pytest.raises(ConfigError):
        to_roman(0)


def test_parse_justify_either_order():
    assert parse_justify("TL") == ("L", "T")
    assert parse_justify("lt") == ("L", "T")
    assert parse_justify("MC") == ("C", "M")
    with pytest.raises(ConfigError, match="invalid justification"):
        parse_justify("XX")


def test_flip_justify():
    assert flip_justify("TL") == "RB"
    assert flip_justify("BR") == "LT"
    assert flip_justify("MC") == "CM"


def test_tag_index_orders():
    assert tag_index(1, 2, 2, 3, Numbering.ROW) == 5
    assert tag_index(1, 2, 2, 3, Numbering.COLUMN) == 5
    assert tag_index(0, 1, 2, 3, Numbering.ROW) == 1
    assert tag_index(0, 1, 2, 3, Numbering.COLUMN) == 2


def test_letter_tags_row_major():
    spec = TagSpec()
    texts = [spec.text_for(r, c, 2, 2) for r in range(2) for c in range(2)]
    assert texts == ["a)", "b)", "c)", "d)"]


def test_letter_tags_column_major():
    spec = TagSpec(numbering=Numbering.COLUMN)
    texts = [spec.text_for(r, c, 2, 2) for r in range(2) for c in range(2)]
    assert texts == ["a)", "c)", "b)", "d)"]


def test_numbered_and_roman_tags():
    assert TagSpec(mode=TagMode.NUMBER, start_number=3, prefix="(").text(1) == "(4)"
    spec = TagSpec(mode=TagMode.NUMBER, roman="upper", suffix="")
    assert [spec.text(k) for k in range(4)] == ["I", "II", "III", "IV"]


def test_start_letter():
    assert TagSpec(start_letter="A", suffix="").text(2) == "C"


def test_roman_with_letters_rejected():
    with pytest.raises(ConfigError, match="Roman numerals AND letters"):
        TagSpec(roman="lower")
