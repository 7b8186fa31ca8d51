"""
PixelGUI HTTP Application
=========================

FastAPI entry point for media-to-Lua conversion.

Endpoints:
    GET  /          - Service information
    GET  /health    - Liveness probe
    GET  /metrics   - Conversion counters
    GET  /presets   - Quality preset table
    POST /estimate  - Advisory script size
    POST /convert   - Upload media, download <gui_name>.lua
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator
from urllib.parse import quote

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from pixelgui.codegen import EmptySequenceError
from pixelgui.config import settings, setup_logging
from pixelgui.encoding import estimate_size
from pixelgui.models import QUALITY_PRESETS, ConversionRequest
from pixelgui.pipeline import convert_media
from pixelgui.source import CanvasUnavailableError, SourceDecodeError


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_startup_time: float = 0.0
_conversion_count: int = 0
_decode_error_count: int = 0
_generation_error_count: int = 0


# =============================================================================
# Request Models
# =============================================================================

class EstimateRequest(BaseModel):
    """Parameters for a size estimate."""

    frame_count: int = Field(..., ge=0, description="Frames in the script")
    width: int = Field(..., ge=1, description="Grid width in cells")
    height: int = Field(..., ge=1, description="Grid height in cells")


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _startup_time

    setup_logging(settings)
    _startup_time = time.time()
    logger.info(f"Starting {settings.app.name} {settings.app.version}")

    yield

    logger.info(f"Shutting down after {_conversion_count} conversions")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="PixelGUI",
    description="Convert images and videos into Roblox pixel-grid Lua scripts",
    version=settings.app.version,
    lifespan=lifespan,
)


@app.exception_handler(SourceDecodeError)
async def handle_decode_error(request: Request, exc: SourceDecodeError) -> JSONResponse:
    global _decode_error_count
    _decode_error_count += 1
    logger.error(f"Decode error on {request.url.path}: {exc}")
    return JSONResponse({"error": "source_decode_error", "detail": str(exc)}, status_code=422)


@app.exception_handler(EmptySequenceError)
async def handle_empty_sequence(request: Request, exc: EmptySequenceError) -> JSONResponse:
    global _generation_error_count
    _generation_error_count += 1
    logger.error(f"Empty sequence on {request.url.path}: {exc}")
    return JSONResponse({"error": "empty_sequence", "detail": str(exc)}, status_code=422)


@app.exception_handler(CanvasUnavailableError)
async def handle_canvas_error(request: Request, exc: CanvasUnavailableError) -> JSONResponse:
    global _generation_error_count
    _generation_error_count += 1
    logger.error(f"Canvas unavailable on {request.url.path}: {exc}")
    return JSONResponse({"error": "canvas_unavailable", "detail": str(exc)}, status_code=500)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "PixelGUI",
        "version": settings.app.version,
        "name": settings.app.name,
        "status": "running",
        "defaults": settings.defaults.model_dump(mode="json"),
    })


@app.get("/health")
async def health() -> JSONResponse:
    """Liveness probe."""
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Conversion counters."""
    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "conversions": _conversion_count,
        "decode_errors": _decode_error_count,
        "generation_errors": _generation_error_count,
    })


@app.get("/presets")
async def presets() -> JSONResponse:
    """Quality preset table."""
    return JSONResponse({
        preset.value: quality.to_dict() for preset, quality in QUALITY_PRESETS.items()
    })


@app.post("/estimate")
async def estimate(body: EstimateRequest) -> JSONResponse:
    """Advisory script size in kilobytes."""
    return JSONResponse({
        "kilobytes": estimate_size(body.frame_count, body.width, body.height),
    })


@app.post("/convert")
async def convert(
    params: Annotated[ConversionRequest, Query()],
    file: UploadFile = File(...),
) -> PlainTextResponse:
    """
    Convert an uploaded image, GIF or video.

    Conversion parameters are query parameters; the response body is the
    Lua script, served as an attachment named <gui_name>.lua.
    """
    global _conversion_count

    max_bytes = int(settings.limits.max_upload_mb * 1024 * 1024)
    too_large = HTTPException(
        status_code=413,
        detail=f"Upload exceeds {settings.limits.max_upload_mb} MB",
    )
    if file.size is not None and file.size > max_bytes:
        raise too_large

    # Never buffer more than one byte past the limit
    data = await file.read(max_bytes + 1)
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")
    if len(data) > max_bytes:
        raise too_large

    result = await convert_media(
        data,
        params,
        filename=file.filename,
        content_type=file.content_type,
    )
    _conversion_count += 1

    return PlainTextResponse(
        result.script,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}",
            "X-Frame-Count": str(result.frame_count),
            "X-Estimated-KB": str(result.estimated_kb),
        },
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pixelgui.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
