"""FastAPI application exposing the converter over HTTP.

WHY: Tools that already hold a model response (web front ends, n8n,
curl scripts) need to repair and export it without shelling out to the
CLI. FastAPI provides automatic OpenAPI documentation and request
validation.

HOW: A single FastAPI app exposes four endpoints grouped by tags. Every
endpoint is a synchronous transformation: the request body carries the
raw response, the handler runs the pipeline, and the result comes back
in the same response. There is no job store.

RULES:
- Error responses use a consistent ErrorResponse schema
- Unknown format keys are rejected with 400
- Unrepairable input (RepairError) is rejected with 422
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from timedtext_converter import __version__
from timedtext_converter.core.ir import Segment
from timedtext_converter.core.pipeline import load_segments, merge_translations
from timedtext_converter.core.repair import RepairError, repair_json
from timedtext_converter.formatters import FORMATTERS, create_formatter
from timedtext_converter.server.models import (
    ErrorResponse,
    ExportRequest,
    FormatInfo,
    HealthResponse,
    SegmentsRequest,
    SegmentsResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Timed-Text Converter API",
    description=(
        "REST API for repairing timed-text responses from generative models "
        "and exporting them as plain text, SRT, WebVTT, LRC, TTML or JSON."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_or_422(request: SegmentsRequest) -> List[Segment]:
    """Run the pipeline, mapping RepairError to an HTTP 422."""
    try:
        return load_segments(request.raw_text, request.granularity)
    except RepairError as exc:
        logger.warning("Rejected unrepairable response (%d chars)", exc.raw_length)
        raise HTTPException(status_code=422, detail=str(exc))


# ---------------------------------------------------------------------------
# Endpoints: Segments
# ---------------------------------------------------------------------------


@app.post(
    "/segments",
    response_model=SegmentsResponse,
    response_model_exclude_none=True,
    tags=["segments"],
    summary="Repair and normalize a model response",
    description=(
        "Recover the segment records from a raw, possibly truncated model "
        "response and return them with repaired, monotonic timing."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "No segment could be recovered"},
    },
)
async def create_segments(request: SegmentsRequest) -> SegmentsResponse:
    segments = _load_or_422(request)
    return SegmentsResponse(
        count=len(segments),
        segments=[s.to_dict() for s in segments],
    )


# ---------------------------------------------------------------------------
# Endpoints: Exports
# ---------------------------------------------------------------------------


@app.post(
    "/exports",
    tags=["exports"],
    summary="Export a model response in one output format",
    description=(
        "Repair and normalize the raw response, optionally merge a "
        "translation response, and render it in the requested format. "
        "The body is the file content with the format's media type."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unknown output format"},
        422: {"model": ErrorResponse, "description": "No segment could be recovered"},
    },
)
async def create_export(request: ExportRequest) -> Response:
    if request.format not in FORMATTERS:
        raise HTTPException(
            status_code=400,
            detail="Unknown output format '{}'. Available: {}".format(
                request.format, ", ".join(sorted(FORMATTERS.keys()))
            ),
        )

    segments = _load_or_422(request)
    if request.translations_raw:
        try:
            records = repair_json(request.translations_raw)
        except RepairError as exc:
            logger.warning("Rejected unrepairable translations (%d chars)", exc.raw_length)
            raise HTTPException(status_code=422, detail=str(exc))
        segments = merge_translations(segments, records)

    formatter = create_formatter(
        request.format,
        granularity=request.granularity,
        language=request.language,
    )
    content = formatter.render(segments, request.text_kind)
    filename = "{}{}".format(request.filename_stem, formatter.suffix)

    return Response(
        content=content,
        media_type=formatter.media_type,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description=(
        "Returns all supported output formats with their identifiers, "
        "human-readable names, file suffixes, and media types."
    ),
)
async def list_formats() -> List[FormatInfo]:
    return [
        FormatInfo(
            key=key,
            name=formatter_cls.name,
            suffix=formatter_cls.suffix,
            media_type=formatter_cls.media_type,
        )
        for key, formatter_cls in sorted(FORMATTERS.items())
    ]


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the timedtext-api console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
