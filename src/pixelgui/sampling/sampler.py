"""
Frame Sampler
=============

Captures a FrameSequence from a RasterSource.

For each planned timestamp, strictly in order:
    1. seek the source and wait for the seek to settle
    2. draw the frame onto the scratch canvas at target size
    3. read back the pixels, apply the quality filter (steps 2-3 run in a
       worker thread)
    4. offer to the dedup filter (when enabled)

Capture N+1 never starts before capture N's readback. Any decode failure
aborts the run and the partial sequence is discarded.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import cv2

from pixelgui.models.quality import QualitySettings, get_quality_settings
from pixelgui.models.raster import FrameSequence, RasterFrame
from pixelgui.models.sampling import SamplingOptions, SamplingPlan
from pixelgui.sampling.dedupe import FrameDeduplicator
from pixelgui.sampling.quality import apply_quality
from pixelgui.source.base import RasterSource
from pixelgui.source.canvas import Canvas
from pixelgui.source.decoder import SourceDecodeError


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SamplingStats:
    """
    Outcome of one sampling run.

    Attributes:
        plan: Resolved capture plan
        captured: Captures performed
        kept: Frames in the output sequence
        dropped: Captures dropped by deduplication
    """

    plan: SamplingPlan
    captured: int
    kept: int
    dropped: int

    def to_dict(self) -> dict:
        return {
            "plan": self.plan.to_dict(),
            "captured": self.captured,
            "kept": self.kept,
            "dropped": self.dropped,
        }


class FrameSampler:
    """
    Sequential seek-and-capture sampler.

    Example:
        sampler = FrameSampler()
        frames = await sampler.sample(
            source,
            target_width=48,
            target_height=27,
            max_frames=60,
            options=SamplingOptions(quality="high", deduplicate=True),
        )
        print(sampler.last_stats.to_dict())
    """

    def __init__(self, log_every_n_frames: int = 10) -> None:
        """
        Initialize sampler.

        Args:
            log_every_n_frames: Log capture progress every N captures
        """
        if log_every_n_frames < 1:
            raise ValueError("log_every_n_frames must be >= 1")

        self.log_every_n_frames = log_every_n_frames
        self._last_stats: Optional[SamplingStats] = None

    @property
    def last_stats(self) -> Optional[SamplingStats]:
        """Stats of the most recent successful run."""
        return self._last_stats

    async def sample(
        self,
        source: RasterSource,
        target_width: int,
        target_height: int,
        max_frames: int,
        options: Optional[SamplingOptions] = None,
    ) -> FrameSequence:
        """
        Capture up to `max_frames` frames evenly spread over the trim range.

        Args:
            source: Media to sample
            target_width: Output frame width
            target_height: Output frame height
            max_frames: Frame cap (>= 1)
            options: Quality, trim range and dedup flag

        Returns:
            FrameSequence, empty when the source has no frames

        Raises:
            SourceDecodeError: If any seek or decode fails
            CanvasUnavailableError: If the scratch canvas cannot be created
        """
        options = options or SamplingOptions()
        plan = SamplingPlan.build(
            duration=source.duration,
            max_frames=max_frames,
            start_frame=options.start_frame,
            end_frame=options.end_frame,
        )
        sequence = FrameSequence(width=target_width, height=target_height)

        if plan.is_empty:
            logger.info(f"Nothing to sample: duration={plan.duration:.3f}s")
            self._last_stats = SamplingStats(plan=plan, captured=0, kept=0, dropped=0)
            return sequence

        canvas = Canvas(target_width, target_height)
        quality = get_quality_settings(options.quality)
        dedup = FrameDeduplicator() if options.deduplicate else None

        logger.info(
            f"Sampling {plan.capture_count} frames at {target_width}x{target_height}: "
            f"window=[{plan.start_time:.3f}s, {plan.end_time:.3f}s), "
            f"interval={plan.interval:.4f}s, quality={options.quality.value}"
        )

        captured = 0
        for timestamp in plan.timestamps():
            frame = await self._capture(source, canvas, timestamp, quality)
            captured += 1

            if dedup is None or dedup.offer(frame):
                sequence.append(frame)

            if captured % self.log_every_n_frames == 0:
                logger.debug(f"Captured {captured}/{plan.capture_count} frames")

        dropped = dedup.dropped_count if dedup else 0
        self._last_stats = SamplingStats(
            plan=plan,
            captured=captured,
            kept=len(sequence),
            dropped=dropped,
        )
        logger.info(
            f"Sampling complete: captured={captured}, kept={len(sequence)}, "
            f"dropped={dropped}"
        )
        return sequence

    def capture_still(
        self,
        source: RasterSource,
        target_width: int,
        target_height: int,
        options: Optional[SamplingOptions] = None,
    ) -> RasterFrame:
        """
        Capture the current frame of a still source without seeking.

        Raises:
            SourceDecodeError: If the image cannot be drawn
            CanvasUnavailableError: If the scratch canvas cannot be created
        """
        options = options or SamplingOptions()
        quality = get_quality_settings(options.quality)
        canvas = Canvas(target_width, target_height)
        return self._draw_filtered(source, canvas, quality)

    async def _capture(
        self,
        source: RasterSource,
        canvas: Canvas,
        timestamp: float,
        quality: QualitySettings,
    ) -> RasterFrame:
        await source.seek(timestamp)
        return await asyncio.to_thread(self._draw_filtered, source, canvas, quality)

    def _draw_filtered(
        self,
        source: RasterSource,
        canvas: Canvas,
        quality: QualitySettings,
    ) -> RasterFrame:
        return apply_quality(self._draw(source, canvas, quality.smoothing), quality)

    @staticmethod
    def _draw(source: RasterSource, canvas: Canvas, smoothing: bool) -> RasterFrame:
        try:
            canvas.draw(source.read(), smoothing=smoothing)
        except (cv2.error, ValueError) as e:
            raise SourceDecodeError(f"Failed to draw source frame: {e}") from e
        return RasterFrame(
            width=canvas.width,
            height=canvas.height,
            pixels=canvas.read_pixels(),
        )
