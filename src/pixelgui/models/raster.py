"""
Raster Models
=============

Pixel containers passed between the capture, filter, dedup and encoding stages.

Design Rules:
    - RasterFrame pixels are RGBA uint8, row-major, top-left origin
    - A RasterFrame never changes after construction (buffer is read-only)
    - FrameSequence holds frames of one size, in playback order
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True, slots=True, eq=False)
class RasterFrame:
    """
    Immutable RGBA raster produced by one capture step.

    Attributes:
        width: Frame width in pixels (> 0)
        height: Frame height in pixels (> 0)
        pixels: (height, width, 4) uint8 array, read-only
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants and lock the buffer."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )
        if not isinstance(self.pixels, np.ndarray):
            raise ValueError(f"pixels must be a numpy array, got {type(self.pixels)!r}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixels shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )
        self.pixels.flags.writeable = False

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterFrame":
        """
        Build a frame from an (H, W, 3) RGB or (H, W, 4) RGBA array.

        The data is copied; RGB input gets an opaque alpha channel.
        """
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {array.shape}")
        height, width = array.shape[:2]
        rgba = np.empty((height, width, 4), dtype=np.uint8)
        rgba[..., :3] = array[..., :3]
        rgba[..., 3] = array[..., 3] if array.shape[2] == 4 else 255
        return cls(width=width, height=height, pixels=rgba)

    @classmethod
    def from_rgb(
        cls,
        width: int,
        height: int,
        values: Sequence[Tuple[int, int, int]],
    ) -> "RasterFrame":
        """Build an opaque frame from row-major (R, G, B) tuples."""
        if len(values) != width * height:
            raise ValueError(
                f"Expected {width * height} pixels for {width}x{height}, got {len(values)}"
            )
        rgb = np.asarray(values, dtype=np.uint8).reshape(height, width, 3)
        return cls.from_array(rgb)

    @property
    def rgb(self) -> np.ndarray:
        """Read-only (H, W, 3) view of the color channels."""
        return self.pixels[..., :3]

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the buffer."""
        return f"RasterFrame({self.width}x{self.height})"


class FrameSequence:
    """
    Ordered frames sharing one width/height.

    Insertion order is playback order. An empty sequence is valid and
    reports the size it was created for (if any).

    Example:
        sequence = FrameSequence(width=32, height=18)
        sequence.append(frame)
    """

    def __init__(
        self,
        frames: Optional[Iterable[RasterFrame]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        self._frames: List[RasterFrame] = []
        self._width = width
        self._height = height
        for frame in frames or ():
            self.append(frame)

    @property
    def width(self) -> Optional[int]:
        return self._width

    @property
    def height(self) -> Optional[int]:
        return self._height

    def append(self, frame: RasterFrame) -> None:
        """
        Add a frame at the end of the sequence.

        Raises:
            ValueError: If the frame size differs from the sequence size
        """
        if self._width is None or self._height is None:
            self._width, self._height = frame.width, frame.height
        elif (frame.width, frame.height) != (self._width, self._height):
            raise ValueError(
                f"Frame size {frame.width}x{frame.height} does not match "
                f"sequence size {self._width}x{self._height}"
            )
        self._frames.append(frame)

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[RasterFrame]:
        return iter(self._frames)

    def __getitem__(self, index: int) -> RasterFrame:
        return self._frames[index]

    def __bool__(self) -> bool:
        return bool(self._frames)

    def __repr__(self) -> str:
        return (
            f"FrameSequence(frames={len(self._frames)}, "
            f"size={self._width}x{self._height})"
        )
