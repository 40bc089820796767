"""Timestamp parsing and formatting for model-generated clock strings.

WHY: The model is told to emit MM:SS.mmm but actually returns whatever it
likes: "00:01:05,300", "1:05.3", "65.3", "00:01:05:300", full-width
"０１：０５．３", or bare numbers. Every later comparison (ordering,
gaps, grouping) depends on turning those into one numeric time base, so
the parser must accept anything and never fail.

HOW: parse_timestamp() width-normalizes, converts decimal commas, strips
noise characters, and interprets the colon-separated parts by count.
The formatters all start from one integer millisecond split so they
agree with each other and round-trip with the parser.

RULES:
- parse_timestamp is pure and total: unparseable, negative, or non-finite → 0.0
- 4 colon parts = H:M:S:ms (hallucinated format), 3 = H:M:S, 2 = M:S
- Formatting rounds to the nearest millisecond; negative input formats as zero
- FOLDED clocks fold hours into minutes (75 min → "75:00.000")
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Union

Number = Union[int, float]

_FULLWIDTH_MAP = {ord("０") + i: str(i) for i in range(10)}
_FULLWIDTH_MAP[ord("：")] = ":"
_FULLWIDTH_MAP[ord("．")] = "."

_DECIMAL_COMMA_RE = re.compile(r",(?=\d)")
_NOISE_RE = re.compile(r"[^\d:.]")


class ClockFormat(str, Enum):
    """Canonical clock string variants."""

    FIXED_HOURS = "fixed_hours"  # HH:MM:SS.mmm
    FOLDED = "folded"  # MM:SS.mmm, minutes may exceed 59


def _to_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


def _finite_or_zero(value: float) -> float:
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def parse_timestamp(token: object) -> float:
    """Parse one timestamp token into seconds.

    Args:
        token: A clock string, a number of seconds, or anything else.

    Returns:
        Seconds as a finite, non-negative float; 0.0 when nothing usable
        can be read from the token.
    """
    if token is None or isinstance(token, bool):
        return 0.0
    if isinstance(token, (int, float)):
        try:
            return _finite_or_zero(float(token))
        except OverflowError:
            return 0.0

    text = str(token).strip().translate(_FULLWIDTH_MAP)
    text = _DECIMAL_COMMA_RE.sub(".", text)
    clean = _NOISE_RE.sub("", text)

    if ":" not in clean:
        return _finite_or_zero(_to_float(clean))

    parts = [_to_float(p) for p in clean.split(":")]
    if len(parts) == 4:
        h, m, s, ms = parts
        total = h * 3600 + m * 60 + s + ms / 1000.0
    elif len(parts) == 3:
        h, m, s = parts
        total = h * 3600 + m * 60 + s
    elif len(parts) == 2:
        m, s = parts
        total = m * 60 + s
    else:
        total = _to_float(clean)
    return _finite_or_zero(total)


def to_millis(seconds: Number) -> int:
    """Round seconds to whole milliseconds (negative/non-finite → 0)."""
    seconds = _finite_or_zero(float(seconds))
    return int(round(seconds * 1000.0))


def quantize(seconds: Number) -> float:
    """Snap a seconds value to millisecond precision."""
    return to_millis(seconds) / 1000.0


def _split_millis(ms_total: int) -> tuple:
    hours, rem = divmod(ms_total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return hours, minutes, secs, millis


def format_timestamp(seconds: Number, clock: ClockFormat = ClockFormat.FOLDED) -> str:
    """Format seconds as a canonical clock string.

    Args:
        seconds: Time in seconds.
        clock: FIXED_HOURS for ``HH:MM:SS.mmm``, FOLDED for ``MM:SS.mmm``.

    Returns:
        The clock string, always with millisecond precision.
    """
    ms_total = to_millis(seconds)
    if clock == ClockFormat.FIXED_HOURS:
        h, m, s, ms = _split_millis(ms_total)
        return "{:02d}:{:02d}:{:02d}.{:03d}".format(h, m, s, ms)
    minutes, rem = divmod(ms_total, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}.{:03d}".format(minutes, secs, millis)


def format_srt_time(seconds: Number) -> str:
    """SRT timecode: ``HH:MM:SS,mmm``."""
    h, m, s, ms = _split_millis(to_millis(seconds))
    return "{:02d}:{:02d}:{:02d},{:03d}".format(h, m, s, ms)


def format_vtt_time(seconds: Number) -> str:
    """WebVTT timestamp: ``MM:SS.mmm`` under one hour, ``HH:MM:SS.mmm`` above."""
    h, m, s, ms = _split_millis(to_millis(seconds))
    if h:
        return "{:02d}:{:02d}:{:02d}.{:03d}".format(h, m, s, ms)
    return "{:02d}:{:02d}.{:03d}".format(m, s, ms)


def format_lrc_tag(seconds: Number) -> str:
    """LRC line tag ``[MM:SS.CC]`` with hundredths precision."""
    cs_total = int(round(_finite_or_zero(float(seconds)) * 100.0))
    minutes, rem = divmod(cs_total, 6000)
    secs, centis = divmod(rem, 100)
    return "[{:02d}:{:02d}.{:02d}]".format(minutes, secs, centis)


def to_ttml_clock(value: object) -> str:
    """Normalize a clock string or number to TTML's ``HH:MM:SS.mmm``.

    Inputs without an hours field ("01:05.3"), without a fractional part
    ("00:01:05"), or as raw seconds ("65.3") all come out in the fixed form.
    """
    return format_timestamp(parse_timestamp(value), ClockFormat.FIXED_HOURS)
