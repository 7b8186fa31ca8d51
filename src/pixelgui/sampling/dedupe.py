"""
Deduplication Filter
====================

Drops captured frames that are near-identical to the last KEPT frame.

Similarity:
    1 - sum(|dR| + |dG| + |dB|) / (pixels * 3 * 255)

    1.0 means identical. A candidate is dropped when similarity > 0.98.
    Comparison is only against the last kept frame, never a window.
"""

import logging
from typing import Optional

import numpy as np

from pixelgui.models.raster import RasterFrame


logger = logging.getLogger(__name__)


SIMILARITY_THRESHOLD = 0.98


def similarity(a: RasterFrame, b: RasterFrame) -> float:
    """
    Pixel-difference similarity of two same-size frames, in [0, 1].

    Alpha is ignored. Symmetric in its arguments.

    Raises:
        ValueError: If the frames differ in size
    """
    if (a.width, a.height) != (b.width, b.height):
        raise ValueError(
            f"Cannot compare {a.width}x{a.height} with {b.width}x{b.height}"
        )

    diff = np.abs(a.rgb.astype(np.int16) - b.rgb.astype(np.int16))
    total = int(diff.sum(dtype=np.int64))
    return 1.0 - total / (a.pixel_count * 3 * 255)


def should_keep(
    candidate: RasterFrame,
    last_kept: Optional[RasterFrame],
    threshold: float = SIMILARITY_THRESHOLD,
) -> bool:
    """Keep the candidate unless it is too similar to the last kept frame."""
    if last_kept is None:
        return True
    return similarity(candidate, last_kept) <= threshold


class FrameDeduplicator:
    """
    Stateful dedup filter for one sampling run.

    Example:
        dedup = FrameDeduplicator()
        for frame in captured:
            if dedup.offer(frame):
                kept.append(frame)
    """

    def __init__(self, threshold: float = SIMILARITY_THRESHOLD) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be in [0, 1]")

        self.threshold = threshold
        self._last_kept: Optional[RasterFrame] = None
        self._kept_count: int = 0
        self._dropped_count: int = 0

    def offer(self, frame: RasterFrame) -> bool:
        """
        Decide whether `frame` is kept; kept frames become the new reference.

        Returns:
            True if the frame should be appended to the output
        """
        if should_keep(frame, self._last_kept, self.threshold):
            self._last_kept = frame
            self._kept_count += 1
            return True

        self._dropped_count += 1
        return False

    @property
    def kept_count(self) -> int:
        return self._kept_count

    @property
    def dropped_count(self) -> int:
        return self._dropped_count

    def reset(self) -> None:
        self._last_kept = None
        self._kept_count = 0
        self._dropped_count = 0

    def get_metrics(self) -> dict:
        return {
            "kept": self._kept_count,
            "dropped": self._dropped_count,
            "threshold": self.threshold,
        }
