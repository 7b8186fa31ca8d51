"""
Scratch Canvas
==============

Reusable drawing surface that every capture is scaled onto.

Design Rules:
    - One canvas per sampling run, reused for every capture
    - Single writer: draw() then read_pixels() before the next draw()
    - read_pixels() returns a copy, frames never alias the surface
"""

import logging

import cv2
import numpy as np


logger = logging.getLogger(__name__)


MAX_CANVAS_DIMENSION = 4096


class CanvasUnavailableError(Exception):
    """Raised when the scratch drawing surface cannot be acquired."""
    pass


class Canvas:
    """
    Fixed-size RGBA scratch surface.

    Scaling mode per draw:
        - smoothing=False: nearest-neighbour
        - smoothing=True: area averaging when shrinking, Lanczos when enlarging

    Example:
        canvas = Canvas(48, 27)
        canvas.draw(source_rgba, smoothing=True)
        pixels = canvas.read_pixels()
    """

    def __init__(self, width: int, height: int) -> None:
        """
        Acquire the surface.

        Raises:
            CanvasUnavailableError: If the size is unusable or allocation fails
        """
        if not (0 < width <= MAX_CANVAS_DIMENSION and 0 < height <= MAX_CANVAS_DIMENSION):
            raise CanvasUnavailableError(
                f"Cannot create a {width}x{height} canvas "
                f"(limit {MAX_CANVAS_DIMENSION}x{MAX_CANVAS_DIMENSION})"
            )
        try:
            self._surface = np.zeros((height, width, 4), dtype=np.uint8)
        except MemoryError as e:
            raise CanvasUnavailableError(
                f"Failed to allocate {width}x{height} canvas: {e}"
            ) from e

        self.width = width
        self.height = height
        self.draw_count = 0

    def draw(self, image: np.ndarray, smoothing: bool) -> None:
        """
        Scale an RGBA image onto the whole surface.

        Args:
            image: (H, W, 4) uint8 source image at native resolution
            smoothing: Use high-quality resampling instead of nearest-neighbour
        """
        if image.ndim != 3 or image.shape[2] != 4 or image.dtype != np.uint8:
            raise ValueError(
                f"Canvas expects (H, W, 4) uint8 input, got {image.shape} {image.dtype}"
            )

        if smoothing:
            shrinking = image.shape[1] >= self.width and image.shape[0] >= self.height
            interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LANCZOS4
        else:
            interpolation = cv2.INTER_NEAREST

        self._surface[...] = cv2.resize(
            np.ascontiguousarray(image),
            (self.width, self.height),
            interpolation=interpolation,
        )
        self.draw_count += 1

    def read_pixels(self) -> np.ndarray:
        """Copy of the current surface contents, (H, W, 4) uint8."""
        return self._surface.copy()
