"""Output formatter registry, the pluggable format hub.

WHY: The CLI, API, and library callers need a single lookup to find the
right formatter by name. A central dict makes it trivial to add new
formats: create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
create_formatter() instantiates one with the options it accepts, and
export() renders in a single call.

RULES:
- Keys are snake_case identifiers (used in CLI flags, API bodies, etc.)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
- Unknown keys raise ValueError listing the available formats
"""

from __future__ import annotations

from typing import Any

from timedtext_converter.config import parse_text_kind
from timedtext_converter.core.ir import Segment, TextKind
from timedtext_converter.formatters.base import BaseFormatter, FormatterOutput
from timedtext_converter.formatters.json_data import JSONFormatter
from timedtext_converter.formatters.lrc import LRCFormatter
from timedtext_converter.formatters.plain_text import PlainTextFormatter
from timedtext_converter.formatters.srt import SRTFormatter
from timedtext_converter.formatters.ttml import TTMLFormatter
from timedtext_converter.formatters.vtt import VTTFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "srt": SRTFormatter,
    "vtt": VTTFormatter,
    "lrc": LRCFormatter,
    "ttml": TTMLFormatter,
    "json": JSONFormatter,
}

__all__ = [
    "FORMATTERS",
    "BaseFormatter",
    "FormatterOutput",
    "create_formatter",
    "export",
]


def create_formatter(key: str, **options: Any) -> BaseFormatter:
    """Instantiate the formatter registered under ``key``.

    Options the formatter does not accept, and options set to None, are
    dropped, so callers can pass one option set to every format.

    Raises:
        ValueError: If ``key`` is not a registered format.
    """
    cls = FORMATTERS.get(key)
    if cls is None:
        raise ValueError(
            "Unknown format '{}'. Available: {}".format(key, ", ".join(FORMATTERS))
        )
    accepted = {k: v for k, v in options.items() if k in cls.options and v is not None}
    return cls(**accepted)


def export(
    key: str,
    segments: list[Segment],
    text_kind: TextKind = TextKind.ORIGINAL,
    **options: Any,
) -> str:
    """Render ``segments`` in the format registered under ``key``.

    Args:
        key: Format key, e.g. ``"srt"``.
        segments: Normalized segments.
        text_kind: Original or translated text (enum or name).
        **options: Format options such as ``granularity`` or ``language``.

    Returns:
        The rendered file content.
    """
    return create_formatter(key, **options).render(segments, parse_text_kind(text_kind))
