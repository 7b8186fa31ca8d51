"""
Raster Source Protocol
======================

Interface the frame sampler drives: seek to a timestamp, then read the
frame shown there at native resolution.

Implementations:
    - StillImageSource: one decoded image, zero duration
    - GifSource: animated GIF frames with per-frame delays (Pillow)
    - VideoSource: any container/codec OpenCV can decode
"""

import logging
from typing import Protocol

import numpy as np

from pixelgui.source.decoder import SourceDecodeError, decode_image


logger = logging.getLogger(__name__)


class RasterSource(Protocol):
    """
    Protocol for decodable media.

    A source exposes exactly one decode position. seek() suspends until
    the position has settled; read() then returns that frame. Callers
    must not overlap seeks.
    """

    @property
    def duration(self) -> float:
        """Source duration in seconds (0 for still images)."""
        ...

    async def seek(self, timestamp: float) -> None:
        """
        Move the decode position to `timestamp` seconds.

        Raises:
            SourceDecodeError: If the position cannot be decoded
        """
        ...

    def read(self) -> np.ndarray:
        """
        Return the frame at the current position.

        Returns:
            (H, W, 4) uint8 RGBA image at native resolution
        """
        ...


class StillImageSource:
    """Single still image exposed through the RasterSource protocol."""

    def __init__(self, image: np.ndarray) -> None:
        if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
            raise ValueError(f"Expected (H, W, 4) uint8 image, got {image.shape} {image.dtype}")
        self._image = image

    @classmethod
    def from_bytes(cls, data: bytes) -> "StillImageSource":
        """Decode still-image bytes (PNG, JPEG, ...)."""
        return cls(decode_image(data))

    @property
    def duration(self) -> float:
        return 0.0

    @property
    def native_size(self) -> tuple:
        """(width, height) of the decoded image."""
        return self._image.shape[1], self._image.shape[0]

    async def seek(self, timestamp: float) -> None:
        return None

    def read(self) -> np.ndarray:
        return self._image

    def close(self) -> None:
        return None


__all__ = ["RasterSource", "StillImageSource", "SourceDecodeError"]
