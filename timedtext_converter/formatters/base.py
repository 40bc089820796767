"""Abstract base formatter and output container.

WHY: Every output format consumes the same normalized Segment list but
produces different file content. This base class enforces a consistent
interface so the CLI, API, and library callers can work with any
formatter generically.

HOW: BaseFormatter is an ABC with class-level metadata (``name``,
``key``, ``suffix``, ``media_type``, accepted ``options``) and one
abstract method, ``render()``, which returns the file content as a
string. ``format()`` wraps that content in a FormatterOutput.

RULES:
- Subclasses MUST set the metadata attributes and implement ``render()``
- ``render()`` is total over normalized input: it never raises on an
  empty list, empty text, or missing translations
- ``suffix`` is the bare extension, e.g. ``".srt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from timedtext_converter.core.ir import Segment, TextKind


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".srt"`` → ``"interview.srt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter, set the metadata attributes
    3. Implement render()
    4. Register in FORMATTERS dict in formatters/__init__.py

    Formatters that take options (VTT granularity, TTML language) accept
    them as keyword arguments in ``__init__`` and list their names in
    ``options`` so the registry can pass only what each one understands.
    """

    name: str = ""
    key: str = ""
    suffix: str = ""
    media_type: str = "text/plain"
    options: tuple[str, ...] = ()

    @abstractmethod
    def render(self, segments: list[Segment], text_kind: TextKind = TextKind.ORIGINAL) -> str:
        """Convert normalized segments into the format's file content.

        Args:
            segments: Output of the normalizer, in timeline order.
            text_kind: Whether to render the original or translated text.

        Returns:
            The complete file content.
        """

    def format(
        self,
        segments: list[Segment],
        text_kind: TextKind = TextKind.ORIGINAL,
    ) -> list[FormatterOutput]:
        """Render ``segments`` and wrap the result as a single output file."""
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=self.render(segments, text_kind),
                media_type=self.media_type,
            )
        ]
