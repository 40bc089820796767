"""Shared test fixtures for the timedtext_converter test suite.

WHY: Multiple test modules need the same representative model responses:
a clean line-level response, a word-level response nested in line
containers, and a truncated one. Centralizing them here keeps every
module testing against the same data.

HOW: Module-level constants hold the raw response texts; fixtures hand
out the texts and the Segments the pipeline builds from them.

RULES:
- Raw responses mimic real model output, including its quirks
- Segment fixtures are built through the public pipeline, never by hand,
  except where a test needs exact times (make_segment)
"""

from __future__ import annotations

import json
from typing import List, Optional

import pytest

from timedtext_converter.core.ir import Granularity, Segment
from timedtext_converter.core.pipeline import load_segments


# ---------------------------------------------------------------------------
# Sample model responses
# ---------------------------------------------------------------------------

LINE_RESPONSE = json.dumps({
    "segments": [
        {"startTime": "00:01.000", "endTime": "00:03.500", "text": "Hello there."},
        {"startTime": "00:03.600", "endTime": "00:06.000", "text": "How are you?"},
        {"startTime": "00:07.500", "endTime": "00:09.250", "text": "Fine, thanks."},
    ]
})

WORD_RESPONSE = json.dumps({
    "segments": [
        {
            "startTime": "00:00.000",
            "endTime": "00:01.200",
            "text": "Hello world",
            "words": [
                {"startTime": "00:00.000", "endTime": "00:00.500", "text": "Hello"},
                {"startTime": "00:00.600", "endTime": "00:01.200", "text": "world."},
            ],
        },
        {
            "startTime": "00:02.500",
            "endTime": "00:03.000",
            "text": "Again",
            "words": [
                {"startTime": "00:02.500", "endTime": "00:03.000", "text": "Again"},
            ],
        },
    ]
})

TRUNCATED_RESPONSE = (
    '{"segments":[{"startTime":"00:01.000","endTime":"00:02.000","text":"Hi"}'
)


def make_segment(
    start: float,
    end: float,
    text: str,
    translated: Optional[str] = None,
) -> Segment:
    """Build a Segment with exact times for formatter and grouping tests."""
    return Segment(start_s=start, end_s=end, text=text, translated_text=translated)


@pytest.fixture
def seg():
    """Factory fixture: seg(start, end, text, translated=None) -> Segment."""
    return make_segment


@pytest.fixture
def line_response() -> str:
    return LINE_RESPONSE


@pytest.fixture
def word_response() -> str:
    return WORD_RESPONSE


@pytest.fixture
def truncated_response() -> str:
    return TRUNCATED_RESPONSE


@pytest.fixture
def line_segments() -> List[Segment]:
    """Three normalized line segments from LINE_RESPONSE."""
    return load_segments(LINE_RESPONSE, Granularity.LINE)


@pytest.fixture
def word_segments() -> List[Segment]:
    """Three normalized word segments from WORD_RESPONSE."""
    return load_segments(WORD_RESPONSE, Granularity.WORD)
