import math

import pytest

from funscriptkit import util


def test_clamp():
    assert util.clamp(5, 0, 10) == 5
    assert util.clamp(-3, 0, 10) == 0
    assert util.clamp(11, 0, 10) == 10
    assert util.clamp(0.5, 0.0, 1.0) == 0.5


def test_map_range_endpoints():
    assert util.map_range(2.0, 2.0, 6.0, 10.0, 30.0) == pytest.approx(10.0)
    assert util.map_range(6.0, 2.0, 6.0, 10.0, 30.0) == pytest.approx(30.0)
    assert util.map_range(4.0, 2.0, 6.0, 10.0, 30.0) < 30.0


def test_lerp_endpoints():
    assert util.lerp(3.0, 9.0, 0.0) == 3.0
    assert util.lerp(3.0, 9.0, 1.0) == 9.0


def test_parse_time_basic():
    assert util.parse_time("00:00:00") == 0.0
    assert util.parse_time("01:00:00") == 3600.0


def test_parse_time_milliseconds_are_integer_count():
    assert util.parse_time("00:00:02.5") == pytest.approx(2.005)
    assert util.parse_time("00:00:02.500") == pytest.approx(2.5)


@pytest.mark.parametrize(
    "text", ["abc", "00:60:00", "00:00:60", "-1:00:00", "00:00:00.1000", "12:34"]
)
def test_parse_time_rejects(text):
    with pytest.raises(ValueError):
        util.parse_time(text)


@pytest.mark.parametrize("seconds", [0.0, 59.25, 3723.456, 7199.5])
def test_format_parse_round_trip(seconds):
    text = util.format_time(seconds, True)
    assert util.parse_time(text) == pytest.approx(seconds, abs=0.002)


def test_format_time_without_ms_drops_fraction():
    text = util.format_time(3723.9, False)
    assert "." not in text
    assert util.parse_time(text) == pytest.approx(3723.0)


def test_format_time_non_finite():
    assert util.format_time(math.nan, True) == "00:00:00.000"
    assert util.format_time(math.inf, False) == util.format_time(0.0, False)


def test_format_bytes():
    assert util.format_bytes(0) == "0 bytes"
    assert util.format_bytes(1023) == "1023 bytes"
    assert util.format_bytes(1024) == "1.00 KB"
    assert util.format_bytes(5 * 1024 * 1024).endswith(" MB")
    assert util.format_bytes(3 * 1024 * 1024 * 1024).endswith(" GB")


def test_trim_functions():
    assert util.trim("  hi \n") == "hi"
    assert util.ltrim("xxaxx", "x") == "axx"
    assert util.rtrim("xxaxx", "x") == "xxa"
    assert util.trim("\t\v\f\r") == ""


def test_contains_insensitive():
    assert util.contains_insensitive("Hello World", "WORLD")
    assert not util.contains_insensitive("abc", "abcd")
    assert util.contains_insensitive("a", "")
    assert not util.contains_insensitive("", "")


def test_string_equals_insensitive():
    assert util.string_equals_insensitive("ABC", "abc")
    assert not util.string_equals_insensitive("abc", "abd")
    assert not util.string_equals_insensitive("abc", "abcd")


def test_starts_and_ends_with():
    assert util.string_starts_with("script.funscript", "script")
    assert util.string_ends_with("script.funscript", ".funscript")
    assert not util.string_ends_with("script.json", ".funscript")