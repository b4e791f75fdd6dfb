from __future__ import annotations

import pytest

from etterna.structs import (Chartkey, Difficulty, FileSize, FileSizeParseError, Rate,
                             Scorekey, Snap)


def test_rate_parsing_and_formatting() -> None:
    rate = Rate.from_string("1.15x")
    assert rate.x20 == 23
    assert str(rate) == "1.15x"
    assert rate.as_float() == pytest.approx(1.15)
    assert Rate.from_float(0.7) == Rate(14)
    assert Rate.from_string("1") + Rate(1) == Rate(21)
    assert Rate() - Rate(2) < Rate()


def test_rate_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="invalid rate"):
        Rate.from_string("fast")
    with pytest.raises(ValueError):
        Rate.from_float(-1.0)


def test_file_size_parse() -> None:
    assert FileSize.parse("12.5 MB").num_bytes == 12_500_000
    assert FileSize.parse("1 KiB").num_bytes == 1024
    assert FileSize.parse("3 gb").gb() == 3
    assert FileSize.parse("2048 b").kb() == 2


@pytest.mark.parametrize("text", ["", "12", "abc kb", "12 parsecs"])
def test_file_size_parse_errors(text: str) -> None:
    with pytest.raises(FileSizeParseError):
        FileSize.parse(text)


def test_difficulty_names() -> None:
    assert Difficulty.parse("Expert") is Difficulty.CHALLENGE
    assert Difficulty.parse("in") is Difficulty.CHALLENGE
    assert Difficulty.from_short_string("NM") is Difficulty.MEDIUM
    assert Difficulty.from_long_string("novice") is Difficulty.BEGINNER
    assert Difficulty.from_short_string("XX") is None
    assert Difficulty.EDIT.to_short_string() == "ED"
    with pytest.raises(ValueError, match="invalid difficulty"):
        Difficulty.parse("impossible")


def test_snap_from_row() -> None:
    assert Snap.from_row(0) is Snap.FOURTH
    assert Snap.from_row(24) is Snap.EIGHTH
    assert Snap.from_row(16) is Snap.TWELFTH
    assert Snap.from_row(12) is Snap.SIXTEENTH
    assert Snap.from_row(1) is Snap.HUNDRED_NINETY_SECOND


def test_keys() -> None:
    key = "X" + "0123456789abcdef" * 2 + "01234567"
    assert Chartkey.is_valid(key)
    assert str(Scorekey("S" + key[1:])) == "S" + key[1:]
    assert not Chartkey.is_valid(key.upper())
    assert not Chartkey.is_valid(key + "0")
    with pytest.raises(ValueError, match="invalid chartkey"):
        Chartkey("Y" + key[1:])
