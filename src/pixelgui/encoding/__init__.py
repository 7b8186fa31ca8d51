"""
Encoding Module
===============

Text serialization of raster frames for generated scripts.
"""

from pixelgui.encoding.pixels import (
    FIXED_OVERHEAD_BYTES,
    encode_frame,
    encode_frames,
    encode_grid,
    estimate_size,
)

__all__ = [
    "FIXED_OVERHEAD_BYTES",
    "encode_frame",
    "encode_frames",
    "encode_grid",
    "estimate_size",
]
