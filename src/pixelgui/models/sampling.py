"""
Sampling Models
===============

Options and the derived capture plan for the frame sampler.

Trim bounds are frame indices on a timeline that is ASSUMED to run at
30 fps, whatever the real source frame rate is:

    total_frames = floor(duration * 30)
    end_frame    = total_frames if unset, 0, or >= total_frames
    start_frame  = clamp(start_frame, 0, end_frame - 1)
    capture_count    = min(max_frames, end_frame - start_frame)
    capture_interval = (end_time - start_time) / capture_count
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from pixelgui.models.quality import QualityPreset


ASSUMED_SOURCE_FPS = 30


class SamplingOptions(BaseModel):
    """
    Caller options for one sampling run.

    Attributes:
        quality: Quality preset applied to every captured frame
        start_frame: First frame index (30 fps timeline)
        end_frame: Exclusive end frame index; None/0 means source end
        deduplicate: Drop frames near-identical to the last kept frame
    """

    quality: QualityPreset = Field(
        default=QualityPreset.HIGH,
        description="Quality preset",
    )
    start_frame: int = Field(
        default=0,
        ge=0,
        description="Trim start frame index (30 fps timeline)",
    )
    end_frame: Optional[int] = Field(
        default=None,
        ge=0,
        description="Trim end frame index, exclusive (None = source end)",
    )
    deduplicate: bool = Field(
        default=False,
        description="Drop near-duplicate consecutive frames",
    )


@dataclass(frozen=True, slots=True)
class SamplingPlan:
    """
    Resolved capture schedule for one source.

    Attributes:
        duration: Source duration in seconds
        capture_count: Number of captures to perform (0 = nothing to do)
        start_frame: Clamped trim start (frame index)
        end_frame: Clamped trim end (frame index, exclusive)
        start_time: start_frame in seconds
        end_time: end_frame in seconds
        interval: Seconds between consecutive captures
    """

    duration: float
    capture_count: int
    start_frame: int
    end_frame: int
    start_time: float
    end_time: float
    interval: float

    @classmethod
    def build(
        cls,
        duration: float,
        max_frames: int,
        start_frame: int = 0,
        end_frame: Optional[int] = None,
    ) -> "SamplingPlan":
        """
        Derive the capture plan from source duration and trim options.

        Args:
            duration: Source duration in seconds (>= 0)
            max_frames: Upper bound on captures (>= 1)
            start_frame: Requested trim start
            end_frame: Requested trim end (None/0 = source end)

        Returns:
            SamplingPlan; capture_count is 0 for empty sources
        """
        if duration < 0 or math.isnan(duration):
            raise ValueError(f"duration must be >= 0, got {duration}")
        if max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {max_frames}")

        total_frames = math.floor(duration * ASSUMED_SOURCE_FPS)
        if not end_frame or end_frame >= total_frames:
            end_frame = total_frames
        start_frame = max(0, min(start_frame, end_frame - 1))

        start_time = start_frame / ASSUMED_SOURCE_FPS
        end_time = end_frame / ASSUMED_SOURCE_FPS

        capture_count = max(0, min(max_frames, end_frame - start_frame))
        interval = (end_time - start_time) / capture_count if capture_count else 0.0

        return cls(
            duration=duration,
            capture_count=capture_count,
            start_frame=start_frame,
            end_frame=end_frame,
            start_time=start_time,
            end_time=end_time,
            interval=interval,
        )

    @property
    def is_empty(self) -> bool:
        return self.capture_count == 0

    def timestamps(self) -> List[float]:
        """Capture times in seconds, evenly spaced over [start_time, end_time)."""
        return [
            self.start_time + index * self.interval
            for index in range(self.capture_count)
        ]

    def to_dict(self) -> dict:
        return {
            "duration": round(self.duration, 3),
            "capture_count": self.capture_count,
            "start_frame": self.start_frame,
            "end_frame": self.end_frame,
            "interval": round(self.interval, 6),
        }
