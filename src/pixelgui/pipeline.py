"""
Conversion Pipeline
===================

End-to-end conversion: media bytes -> frames -> Lua script.

    open_source -> FrameSampler (capture, quality, dedup)
                -> LuaScriptGenerator -> ConversionResult

Still images (and single-frame GIFs) skip sampling and are drawn once.
No partial output: any failure propagates and nothing is returned.
Decoding, drawing and script rendering run in worker threads so the
event loop stays free while a conversion is in progress.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from pixelgui.codegen.lua import LuaScriptGenerator
from pixelgui.encoding.pixels import estimate_size
from pixelgui.models.generation import ConversionRequest
from pixelgui.models.raster import FrameSequence
from pixelgui.sampling.sampler import FrameSampler, SamplingStats
from pixelgui.source.base import RasterSource, StillImageSource
from pixelgui.source.factory import open_source


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """
    Output of one conversion.

    Attributes:
        script: Generated Lua source
        filename: Suggested file name (<gui_name>.lua)
        frame_count: Frames embedded in the script
        width: Grid width in cells
        height: Grid height in cells
        estimated_kb: Advisory size estimate
        stats: Sampling stats (None for still images)
    """

    script: str
    filename: str
    frame_count: int
    width: int
    height: int
    estimated_kb: int
    stats: Optional[SamplingStats] = None

    @property
    def is_animated(self) -> bool:
        return self.frame_count > 1

    def to_dict(self) -> dict:
        """Summary without the script body."""
        return {
            "filename": self.filename,
            "frame_count": self.frame_count,
            "width": self.width,
            "height": self.height,
            "estimated_kb": self.estimated_kb,
            "bytes": len(self.script),
            "stats": self.stats.to_dict() if self.stats else None,
        }


async def convert_source(
    source: RasterSource,
    request: ConversionRequest,
    sampler: Optional[FrameSampler] = None,
    generator: Optional[LuaScriptGenerator] = None,
) -> ConversionResult:
    """
    Convert an already opened source.

    Raises:
        SourceDecodeError: If capture fails
        CanvasUnavailableError: If the scratch canvas cannot be created
        EmptySequenceError: If sampling produced no frames
    """
    sampler = sampler or FrameSampler()
    generator = generator or LuaScriptGenerator()
    options = request.to_sampling_options()
    config = request.to_generation_config()

    stats: Optional[SamplingStats] = None
    if isinstance(source, StillImageSource):
        frame = await asyncio.to_thread(
            sampler.capture_still, source, request.width, request.height, options
        )
        frames = FrameSequence([frame])
    else:
        frames = await sampler.sample(
            source,
            target_width=request.width,
            target_height=request.height,
            max_frames=request.max_frames,
            options=options,
        )
        stats = sampler.last_stats

    script = await asyncio.to_thread(generator.generate, frames, config)
    return ConversionResult(
        script=script,
        filename=config.filename,
        frame_count=len(frames),
        width=request.width,
        height=request.height,
        estimated_kb=estimate_size(len(frames), request.width, request.height),
        stats=stats,
    )


async def convert_media(
    data: bytes,
    request: ConversionRequest,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> ConversionResult:
    """
    Convert uploaded media bytes into a script.

    Args:
        data: Raw image/GIF/video bytes
        request: Conversion parameters
        filename: Original file name, used for type detection
        content_type: Declared MIME type, used for type detection

    Raises:
        SourceDecodeError: If the media cannot be decoded
        CanvasUnavailableError: If the scratch canvas cannot be created
        EmptySequenceError: If the media yields no frames
    """
    source = await asyncio.to_thread(
        open_source, data, filename=filename, content_type=content_type
    )
    try:
        result = await convert_source(source, request)
    finally:
        source.close()

    logger.info(
        f"Converted {filename or '<bytes>'}: frames={result.frame_count}, "
        f"~{result.estimated_kb} KB -> {result.filename}"
    )
    return result
