"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint pair (request + response) has its own model. The
granularity and text-kind enums come straight from the IR so the API
accepts exactly the names the library does.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Segment fields use the external camelCase names (startTime, endTime)
- ``format`` stays a plain string so unknown keys can be answered with
  400 and the list of available formats
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from timedtext_converter.core.ir import Granularity, TextKind


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SegmentsRequest(BaseModel):
    """Raw model response to repair and normalize."""

    raw_text: str = Field(description="The model's response text, possibly fenced or truncated.")
    granularity: Granularity = Field(
        default=Granularity.LINE,
        description="Whether the response holds whole lines or single words.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "raw_text": '{"segments":[{"startTime":"00:01.000","endTime":"00:02.000","text":"Hi"}',
                "granularity": "line",
            }
        ]
    }}


class ExportRequest(SegmentsRequest):
    """Raw model response plus the export settings.

    RULES:
    - format must be a key of the formatter registry
    - translations_raw is a second model response, paired by position
    - language only affects TTML output
    """

    format: str = Field(description="Output format key, e.g. 'srt' or 'vtt'.")
    text_kind: TextKind = Field(
        default=TextKind.ORIGINAL,
        description="Render the original or the translated text.",
    )
    translations_raw: Optional[str] = Field(
        default=None,
        description="Optional translation response whose records fill translatedText.",
    )
    language: Optional[str] = Field(
        default=None,
        description="xml:lang for TTML output.",
    )
    filename_stem: str = Field(
        default="transcript",
        max_length=200,
        pattern=r"^[A-Za-z0-9][A-Za-z0-9._ -]*$",
        description=(
            "Stem used for the Content-Disposition filename. ASCII letters, "
            "digits, dots, dashes, underscores and spaces only."
        ),
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SegmentOut(BaseModel):
    """One normalized segment in its external shape."""

    startTime: str = Field(description="Start clock, MM:SS.mmm.")
    endTime: str = Field(description="End clock, MM:SS.mmm.")
    text: str = Field(description="Original text.")
    translatedText: Optional[str] = Field(default=None, description="Merged translation.")
    words: Optional[List[SegmentOut]] = Field(
        default=None,
        description="Word spans nested in a line segment.",
    )


class SegmentsResponse(BaseModel):
    """Normalized segments recovered from a raw response."""

    count: int = Field(description="Number of segments.")
    segments: List[SegmentOut] = Field(description="Segments in timeline order.")


class FormatInfo(BaseModel):
    """Description of an available output format.

    WHY: Clients can query the /formats endpoint to discover which
    output formats are supported and what they produce.
    """

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '.srt').")
    media_type: str = Field(description="MIME type of the rendered content.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
