"""
GIF Source
==========

Animated GIF decoding with Pillow.

Only the frame delays and the first frame are read up front. The image
stays open and each frame is composited on demand when read, so memory
holds one decoded frame at a time however many frames the GIF carries.
"""

import asyncio
import bisect
import io
import logging
from typing import List, Optional

import numpy as np
from PIL import Image, ImageSequence, UnidentifiedImageError

from pixelgui.source.decoder import SourceDecodeError
from pixelgui.source.video import TIME_PRECISION


logger = logging.getLogger(__name__)


DEFAULT_FRAME_DELAY_MS = 100


class GifSource:
    """
    Animated GIF exposed through the RasterSource protocol.

    Attributes:
        frame_count: Number of GIF frames
        delays_ms: Display delay of each frame in milliseconds
    """

    def __init__(self, data: bytes) -> None:
        """
        Open a GIF and read its frame timeline.

        Raises:
            SourceDecodeError: If Pillow cannot read the data
        """
        self.delays_ms: List[int] = []

        try:
            self._image = Image.open(io.BytesIO(data))
        except (UnidentifiedImageError, OSError, EOFError, ValueError) as e:
            raise SourceDecodeError(f"Failed to decode GIF: {e}") from e

        try:
            for frame in ImageSequence.Iterator(self._image):
                delay = frame.info.get("duration") or DEFAULT_FRAME_DELAY_MS
                self.delays_ms.append(int(delay))
        except (OSError, EOFError, ValueError) as e:
            self._image.close()
            raise SourceDecodeError(f"Failed to decode GIF: {e}") from e

        if not self.delays_ms:
            self._image.close()
            raise SourceDecodeError("GIF contains no frames")

        # End time (seconds) of each frame on the playback timeline
        self._frame_ends: List[float] = []
        elapsed_ms = 0
        for delay in self.delays_ms:
            elapsed_ms += delay
            self._frame_ends.append(elapsed_ms / 1000.0)

        self._index = 0
        self._loaded_index: Optional[int] = None
        self._loaded: Optional[np.ndarray] = None
        try:
            self.read()
        except SourceDecodeError:
            self._image.close()
            raise

        logger.info(
            f"GifSource opened: {self.frame_count} frames, "
            f"duration={self.duration:.2f}s"
        )

    @property
    def frame_count(self) -> int:
        return len(self.delays_ms)

    @property
    def duration(self) -> float:
        return self._frame_ends[-1]

    def frame_index_at(self, timestamp: float) -> int:
        """Index of the frame displayed at `timestamp` seconds."""
        index = bisect.bisect_right(self._frame_ends, round(timestamp, TIME_PRECISION))
        return min(index, self.frame_count - 1)

    async def seek(self, timestamp: float) -> None:
        self._index = self.frame_index_at(timestamp)
        await asyncio.sleep(0)

    def read(self) -> np.ndarray:
        if self._loaded_index != self._index:
            self._loaded = self._decode(self._index)
            self._loaded_index = self._index
        return self._loaded

    def first_frame(self) -> np.ndarray:
        return self._decode(0)

    def _decode(self, index: int) -> np.ndarray:
        try:
            self._image.seek(index)
            return np.array(self._image.convert("RGBA"), dtype=np.uint8)
        except (OSError, EOFError, ValueError) as e:
            raise SourceDecodeError(f"Failed to decode GIF frame {index}: {e}") from e

    def close(self) -> None:
        self._loaded = None
        self._loaded_index = None
        self._image.close()
