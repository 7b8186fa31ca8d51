"""
Test Configuration
==================

Pytest fixtures and test configuration for PixelGUI.
"""

import asyncio
import io
from typing import Callable, List, Optional

import cv2
import numpy as np
import pytest
from PIL import Image

from pixelgui.models import RasterFrame
from pixelgui.source import SourceDecodeError


class FakeSource:
    """
    In-memory RasterSource.

    The frame at time t is produced by `frame_fn(t)`; by default a
    horizontal gradient whose red channel encodes the timestamp.
    Every seek/read is recorded in `events`.
    """

    def __init__(
        self,
        duration: float,
        width: int = 64,
        height: int = 48,
        frame_fn: Optional[Callable[[float], np.ndarray]] = None,
        fail_on_seek: Optional[int] = None,
    ) -> None:
        self._duration = duration
        self.width = width
        self.height = height
        self.frame_fn = frame_fn or self._gradient
        self.fail_on_seek = fail_on_seek
        self.seeks: List[float] = []
        self.events: List[str] = []
        self._position: Optional[float] = None

    @property
    def duration(self) -> float:
        return self._duration

    async def seek(self, timestamp: float) -> None:
        if self.fail_on_seek is not None and len(self.seeks) == self.fail_on_seek:
            raise SourceDecodeError(f"seek failed at {timestamp}")
        self.events.append("seek")
        await asyncio.sleep(0)
        self.seeks.append(timestamp)
        self._position = timestamp

    def read(self) -> np.ndarray:
        self.events.append("read")
        return self.frame_fn(self._position)

    def _gradient(self, timestamp: float) -> np.ndarray:
        image = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        image[..., 0] = int(timestamp * 100) % 256
        image[..., 1] = np.linspace(0, 255, self.width, dtype=np.uint8)[None, :]
        image[..., 2] = np.linspace(0, 255, self.height, dtype=np.uint8)[:, None]
        image[..., 3] = 255
        return image


@pytest.fixture
def fake_source() -> Callable[..., FakeSource]:
    """Factory for FakeSource instances."""
    return FakeSource


@pytest.fixture
def make_frame() -> Callable[..., RasterFrame]:
    """Factory for solid-color frames."""

    def _make(width: int = 4, height: int = 4, color=(0, 0, 0), alpha: int = 255) -> RasterFrame:
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        pixels[..., :3] = color
        pixels[..., 3] = alpha
        return RasterFrame(width=width, height=height, pixels=pixels)

    return _make


@pytest.fixture
def random_frame() -> RasterFrame:
    """Deterministic noisy 12x9 frame with random alpha."""
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(9, 12, 4), dtype=np.uint8)
    return RasterFrame(width=12, height=9, pixels=pixels)


@pytest.fixture
def two_pixel_png() -> bytes:
    """2x1 PNG with pixels (10,20,30) and (200,210,220)."""
    bgr = np.array([[[30, 20, 10], [220, 210, 200]]], dtype=np.uint8)
    ok, encoded = cv2.imencode(".png", bgr)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def animated_gif() -> bytes:
    """8x8 GIF: red 100ms, green 200ms, blue 300ms."""
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]
    frames = [Image.new("RGB", (8, 8), color) for color in colors]
    buffer = io.BytesIO()
    frames[0].save(
        buffer,
        format="GIF",
        save_all=True,
        append_images=frames[1:],
        duration=[100, 200, 300],
        loop=0,
    )
    return buffer.getvalue()
