"""
Pixel Encoder
=============

Serializes raster frames into the comma-joined integer text embedded in
generated scripts, and estimates the resulting script size.

Formats:
    encode_frame:  "R,G,B,R,G,B,..."               (animation frames)
    encode_grid:   "{x,y,R,G,B},{x,y,R,G,B},..."   (static image)

Both walk pixels row-major (y outer, x inner) from (0, 0). Alpha is
dropped; every emitted channel is an integer in [0, 255].
"""

import math
from typing import Iterable

import numpy as np

from pixelgui.models.raster import RasterFrame


FIXED_OVERHEAD_BYTES = 2000


def encode_frame(frame: RasterFrame) -> str:
    """Flat R,G,B triples for every pixel, alpha omitted."""
    return ",".join(map(str, frame.rgb.reshape(-1).tolist()))


def encode_grid(frame: RasterFrame) -> str:
    """(x, y, R, G, B) tuples for every pixel, as Lua table constructors."""
    ys, xs = np.indices((frame.height, frame.width))
    rows = np.column_stack(
        (xs.reshape(-1), ys.reshape(-1), frame.rgb.reshape(-1, 3).astype(np.int64))
    )
    return ",".join(
        "{" + ",".join(map(str, row)) + "}" for row in rows.tolist()
    )


def encode_frames(frames: Iterable[RasterFrame]) -> str:
    """Frame table body: one {R,G,B,...} constructor per frame."""
    return ",".join("{" + encode_frame(frame) + "}" for frame in frames)


def estimate_size(frame_count: int, width: int, height: int) -> int:
    """
    Advisory script size in kilobytes.

        ceil((frames * width * height * 3 + 2000) / 1024)

    Monotonically non-decreasing in every argument.
    """
    if frame_count < 0 or width < 0 or height < 0:
        raise ValueError("frame_count, width and height must be >= 0")
    return math.ceil((frame_count * width * height * 3 + FIXED_OVERHEAD_BYTES) / 1024)
