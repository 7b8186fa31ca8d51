"""
Video Source
============

OpenCV-backed video decoding with seek-and-capture at arbitrary timestamps.

Design Rules:
    - One cv2.VideoCapture per source, one decode position at a time
    - Blocking decode work runs in a worker thread; seek() is the suspend point
    - Any failed seek/decode raises SourceDecodeError
"""

import asyncio
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np

from pixelgui.source.decoder import SourceDecodeError, to_rgba


logger = logging.getLogger(__name__)


# Decimal places kept when converting media time to a frame position
TIME_PRECISION = 6


def frame_index(timestamp: float, fps: float) -> int:
    """
    Frame displayed at `timestamp` seconds on an `fps` timeline.

    The product is rounded to microsecond precision before flooring, so
    evenly spaced timestamps such as 0 + 3 * (1 / 30) land on their frame
    boundary instead of the frame before it.
    """
    return math.floor(round(timestamp * fps, TIME_PRECISION))


class VideoSource:
    """
    Seekable video file.

    Attributes:
        path: File being decoded
        native_fps: Frame rate reported by the container
        frame_count: Frame count reported by the container

    Example:
        with VideoSource.from_bytes(data, suffix=".mp4") as source:
            await source.seek(1.5)
            rgba = source.read()
    """

    def __init__(self, path: Union[str, Path], owns_file: bool = False) -> None:
        """
        Open a video and read its metadata.

        Args:
            path: Path to the video file
            owns_file: Delete the file on close (temporary uploads)

        Raises:
            SourceDecodeError: If the file cannot be opened or has no usable metadata
        """
        self.path = Path(path)
        self._owns_file = owns_file
        self._current: Optional[np.ndarray] = None

        self._capture = cv2.VideoCapture(str(self.path))
        if not self._capture.isOpened():
            self.close()
            raise SourceDecodeError(f"Failed to open video: {self.path.name}")

        self.native_fps = float(self._capture.get(cv2.CAP_PROP_FPS) or 0.0)
        self.frame_count = int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0)

        if self.native_fps <= 0 or self.frame_count <= 0:
            self.close()
            raise SourceDecodeError(
                f"Cannot read video metadata for {self.path.name}: "
                f"fps={self.native_fps}, frames={self.frame_count}"
            )

        logger.info(
            f"VideoSource opened: {self.path.name}, "
            f"{self.frame_count} frames @ {self.native_fps:.2f} fps, "
            f"duration={self.duration:.2f}s"
        )

    @classmethod
    def from_bytes(cls, data: bytes, suffix: str = ".mp4") -> "VideoSource":
        """
        Open uploaded video bytes via a temporary file.

        The temporary file is removed when the source is closed.
        """
        fd, name = tempfile.mkstemp(prefix="pixelgui-", suffix=suffix)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        return cls(name, owns_file=True)

    @property
    def duration(self) -> float:
        return self.frame_count / self.native_fps

    async def seek(self, timestamp: float) -> None:
        """Seek to `timestamp` seconds and decode the frame shown there."""
        self._current = await asyncio.to_thread(self._decode_at, timestamp)

    def _decode_at(self, timestamp: float) -> np.ndarray:
        index = min(max(frame_index(timestamp, self.native_fps), 0), self.frame_count - 1)
        try:
            self._capture.set(cv2.CAP_PROP_POS_FRAMES, index)
            ok, frame = self._capture.read()
        except cv2.error as e:
            raise SourceDecodeError(
                f"Decode failed at t={timestamp:.3f}s (frame {index}): {e}"
            ) from e

        if not ok or frame is None:
            raise SourceDecodeError(
                f"Seek failed at t={timestamp:.3f}s (frame {index}) in {self.path.name}"
            )

        logger.debug(f"Decoded frame {index} at t={timestamp:.3f}s")
        return to_rgba(frame, channel_order="BGR")

    def read(self) -> np.ndarray:
        if self._current is None:
            raise SourceDecodeError("No frame decoded yet, seek() first")
        return self._current

    def close(self) -> None:
        """Release the capture and remove owned temporary files."""
        capture = getattr(self, "_capture", None)
        if capture is not None:
            capture.release()
        if self._owns_file:
            self.path.unlink(missing_ok=True)
            self._owns_file = False

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
