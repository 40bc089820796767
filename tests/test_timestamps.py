"""Tests for timestamp parsing and formatting.

WHY: Every ordering and grouping decision downstream depends on the
parser turning whatever clock string the model produced into the right
number of seconds, and on the formatters agreeing with it.

RULES:
- The parser must never raise, whatever it is given
- Formatting then parsing returns the same value within 1 ms
"""

import math

import pytest

from timedtext_converter.core.timestamps import (
    ClockFormat,
    format_lrc_tag,
    format_srt_time,
    format_timestamp,
    format_vtt_time,
    parse_timestamp,
    quantize,
    to_ttml_clock,
)


class TestParseTimestamp:
    """Accepted clock shapes."""

    @pytest.mark.parametrize("token, expected", [
        ("01:05.300", 65.3),
        ("1:05.3", 65.3),
        ("00:01:05.300", 65.3),
        ("00:01:05,300", 65.3),
        ("00:00:01,500", 1.5),
        ("65.3", 65.3),
        ("01:02:03", 3723.0),
        ("00:01:05:300", 65.3),
        (" 00:10.000 ", 10.0),
        ("12.5s", 12.5),
    ])
    def test_clock_shapes(self, token, expected):
        assert parse_timestamp(token) == pytest.approx(expected)

    def test_full_width_digits(self):
        assert parse_timestamp("０１：３０．５") == pytest.approx(90.5)

    def test_numbers_pass_through(self):
        assert parse_timestamp(12) == 12.0
        assert parse_timestamp(1.25) == 1.25

    def test_tiny_float_is_not_mangled(self):
        assert parse_timestamp(1e-05) == pytest.approx(0.00001)

    def test_five_parts_fall_back_to_float(self):
        # "1:2:3:4:5" is not a float, so the fallback yields zero
        assert parse_timestamp("1:2:3:4:5") == 0.0


class TestParseTimestampTotality:
    """The parser returns a finite, non-negative float for any input."""

    @pytest.mark.parametrize("token", [
        None, "", "abc", "::", "-5", -3, float("nan"), float("inf"),
        "9" * 400, 10 ** 400, -(10 ** 400), True, [], {}, "１２ａｂ",
    ])
    def test_never_raises(self, token):
        value = parse_timestamp(token)
        assert isinstance(value, float)
        assert math.isfinite(value)
        assert value >= 0.0

    def test_garbage_is_zero(self):
        assert parse_timestamp("no time here") == 0.0
        assert parse_timestamp(None) == 0.0


class TestFormatTimestamp:

    def test_folded_default(self):
        assert format_timestamp(65.3) == "01:05.300"

    def test_folded_keeps_minutes_past_an_hour(self):
        assert format_timestamp(75 * 60) == "75:00.000"

    def test_fixed_hours(self):
        assert format_timestamp(3723.5, ClockFormat.FIXED_HOURS) == "01:02:03.500"

    def test_rounds_to_nearest_millisecond(self):
        assert format_timestamp(1.0004) == "00:01.000"
        assert format_timestamp(1.0006) == "00:01.001"

    def test_negative_formats_as_zero(self):
        assert format_timestamp(-4) == "00:00.000"

    @pytest.mark.parametrize("clock", list(ClockFormat))
    @pytest.mark.parametrize("value", [0.0, 0.001, 1.5, 59.999, 65.3, 3599.999, 3723.456, 90061.5])
    def test_round_trip(self, clock, value):
        assert parse_timestamp(format_timestamp(value, clock)) == pytest.approx(value, abs=0.001)


class TestFormatVariants:

    def test_srt_time(self):
        assert format_srt_time(3723.5) == "01:02:03,500"
        assert format_srt_time(1.5) == "00:00:01,500"

    def test_vtt_time_without_hours(self):
        assert format_vtt_time(5) == "00:05.000"

    def test_vtt_time_with_hours(self):
        assert format_vtt_time(3723.5) == "01:02:03.500"

    def test_lrc_tag(self):
        assert format_lrc_tag(65.3) == "[01:05.30]"

    def test_lrc_tag_rounds_into_next_second(self):
        assert format_lrc_tag(59.996) == "[01:00.00]"

    @pytest.mark.parametrize("value, expected", [
        ("01:05.3", "00:01:05.300"),
        ("00:01:05", "00:01:05.000"),
        ("65.3", "00:01:05.300"),
        (65.3, "00:01:05.300"),
    ])
    def test_ttml_clock(self, value, expected):
        assert to_ttml_clock(value) == expected

    def test_quantize(self):
        assert quantize(1.23456) == 1.235
