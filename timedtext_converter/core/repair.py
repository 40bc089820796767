"""Best-effort recovery of segment records from broken model JSON.

WHY: Long transcriptions regularly hit the model's output limit, so the
JSON stops mid-record. Other runs wrap the JSON in a Markdown fence, use
single quotes, or put unescaped quotes inside the text. Discarding a
whole transcription because of a missing "]}" wastes the request, so the
converter recovers every record it can before giving up.

HOW: Strategies run in order and the first one that yields records wins:
  1. Strip a ``` / ```json fence and whole-line // comments.
  2. Parse directly; accept {"segments": [...]} or a top-level list.
  3. Truncation repair: cut after a closing brace (latest first) and
     append the closers that re-balance whatever is still open.
  4. Pattern scraping: pull startTime/endTime/text triples out of the
     text in either key order, tolerating quote style and bare numbers.
If nothing is recovered, RepairError is raised.

RULES:
- Pure: no I/O, the input string is never modified in place
- Strategy 2 success means 3 and 4 never run
- Scraped text values are unescaped via json.loads, with a literal
  replacement fallback when that fails
- Scraping flattens hierarchy: word-mode containers and their words both
  come back as records
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# How many closing braces truncation repair walks back over before giving up.
_MAX_TRUNCATION_ATTEMPTS = 50

_FENCE_OPEN_RE = re.compile(r"^```[\w-]*[ \t]*\n?")
_FENCE_CLOSE_RE = re.compile(r"\n?[ \t]*```\s*$")
_LINE_COMMENT_RE = re.compile(r"^[ \t]*//.*$", re.MULTILINE)

_CLOSERS = {"[": "]", "{": "}"}


class RepairError(ValueError):
    """Raised when no segment record can be recovered from a response.

    WHY: Callers need a typed exception to tell an unusable response apart
    from a programming error, so they can discard the batch or ask the
    model again.

    HOW: Raised by repair_json after all strategies come back empty.

    RULES:
    - raw_length is the length of the offending text, for diagnostics
    - The message never includes the raw text itself
    """

    def __init__(self, raw_length: int) -> None:
        self.raw_length = raw_length
        super().__init__(
            "Response structure invalid and could not be repaired "
            "({} chars)".format(raw_length)
        )


# ---------------------------------------------------------------------------
# Strategy 1: fence stripping
# ---------------------------------------------------------------------------


def strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence and whole-line // comments."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN_RE.sub("", text, count=1)
        text = _FENCE_CLOSE_RE.sub("", text)
    text = _LINE_COMMENT_RE.sub("", text)
    return text.strip()


def _segments_from(parsed: Any) -> Optional[List[Any]]:
    """Return the segment list inside a decoded response, if any."""
    if isinstance(parsed, dict):
        segments = parsed.get("segments")
        if isinstance(segments, list) and segments:
            return segments
        return None
    if isinstance(parsed, list) and parsed:
        return parsed
    return None


# ---------------------------------------------------------------------------
# Strategy 2: direct parse
# ---------------------------------------------------------------------------


def _parse_direct(text: str) -> Optional[List[Any]]:
    try:
        return _segments_from(json.loads(text))
    except ValueError:
        # Also raised for integers past the interpreter's digit limit
        return None


# ---------------------------------------------------------------------------
# Strategy 3: truncation repair
# ---------------------------------------------------------------------------


def _closing_sequence(prefix: str) -> Optional[str]:
    """Return the closers that balance ``prefix``, or None if it cannot be balanced.

    Brackets inside string literals are ignored. A prefix that ends inside
    a string, or closes a bracket it never opened, cannot be balanced.
    """
    stack: List[str] = []
    in_string = False
    escaped = False
    for ch in prefix:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("]", "}"):
            if not stack or stack[-1] != ch:
                return None
            stack.pop()
    if in_string:
        return None
    return "".join(reversed(stack))


def _repair_truncated(text: str) -> Optional[List[Any]]:
    end = len(text)
    for _ in range(_MAX_TRUNCATION_ATTEMPTS):
        idx = text.rfind("}", 0, end)
        if idx == -1:
            return None
        candidate = text[:idx + 1]
        closers = _closing_sequence(candidate)
        if closers is not None:
            try:
                records = _segments_from(json.loads(candidate + closers))
            except ValueError:
                records = None
            if records:
                return records
        end = idx
    return None


# ---------------------------------------------------------------------------
# Strategy 4: pattern scraping
# ---------------------------------------------------------------------------


def _key(names: str) -> str:
    return r"""["'](?:{})["']\s*:\s*""".format(names)


def _time_value(name: str) -> str:
    return (
        r"""(?:"(?P<{0}_dq>[^"]*)"|'(?P<{0}_sq>[^']*)'|(?P<{0}_num>\d[\d:.,]*))"""
    ).format(name)


# A text value ends at the first matching quote that is followed by the end
# of the object, the end of the input, or a comma introducing another key.
# Inner quotes followed by anything else are kept as part of the text, so a
# value never runs on into the next record.
_TEXT_END = r"""\s*(?:[}\]]|,\s*["'{\[]|$)"""

_TEXT_VALUE = (
    r"""(?:"(?P<text_dq>(?:\\.|"(?!{end})|[^\\\n"])*)"(?={end})"""
    r"""|'(?P<text_sq>(?:\\.|'(?!{end})|[^\\\n'])*)'(?={end}))"""
).format(end=_TEXT_END)

_SEP = r"\s*,\s*"
_START_KEY = _key("startTime|start_time|start")
_END_KEY = _key("endTime|end_time|end")
_TEXT_KEY = _key("text")

_TIME_FIRST_RE = re.compile(
    _START_KEY + _time_value("start") + _SEP
    + _END_KEY + _time_value("end") + _SEP
    + _TEXT_KEY + _TEXT_VALUE
)

_TEXT_FIRST_RE = re.compile(
    _TEXT_KEY + _TEXT_VALUE + _SEP
    + _START_KEY + _time_value("start") + _SEP
    + _END_KEY + _time_value("end")
)

_UNESCAPED_QUOTE_RE = re.compile(r'(?<!\\)"')


def _group(match: "re.Match[str]", name: str) -> str:
    for suffix in ("_dq", "_sq", "_num"):
        key = name + suffix
        if key in match.re.groupindex and match.group(key) is not None:
            return match.group(key)
    return ""


def _unescape(value: str) -> str:
    """Decode backslash escapes in a scraped text value."""
    try:
        return json.loads('"' + _UNESCAPED_QUOTE_RE.sub(r'\\"', value) + '"')
    except json.JSONDecodeError:
        return (
            value.replace('\\"', '"')
            .replace("\\'", "'")
            .replace("\\\\", "\\")
            .replace("\\n", "\n")
        )


def _scrape_records(text: str) -> List[Dict[str, str]]:
    matches = list(_TIME_FIRST_RE.finditer(text)) + list(_TEXT_FIRST_RE.finditer(text))
    matches.sort(key=lambda m: m.start())

    records: List[Dict[str, str]] = []
    last_end = -1
    for match in matches:
        # Two orderings can claim the same span; keep the earlier one.
        if match.start() < last_end:
            continue
        last_end = match.end()
        records.append({
            "startTime": _group(match, "start"),
            "endTime": _group(match, "end"),
            "text": _unescape(_group(match, "text")),
        })
    return records


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def repair_json(raw: str) -> List[Any]:
    """Recover the list of segment records from a raw model response.

    Args:
        raw: The model's response text, possibly fenced, truncated, or
             otherwise malformed.

    Returns:
        The recovered records, in document order. Items are normally dicts
        shaped like {startTime, endTime, text}; the normalizer skips any
        that are not.

    Raises:
        RepairError: If no strategy recovers a single record.
    """
    if raw is None:
        raw = ""
    text = strip_code_fence(raw)

    records = _parse_direct(text)
    if records:
        logger.debug("Parsed %d records directly", len(records))
        return records

    records = _repair_truncated(text)
    if records:
        logger.debug("Recovered %d records by closing truncated JSON", len(records))
        return records

    records = _scrape_records(text)
    if records:
        logger.warning(
            "JSON unrecoverable, scraped %d records by pattern (%d chars)",
            len(records), len(raw),
        )
        return records

    raise RepairError(len(raw))
