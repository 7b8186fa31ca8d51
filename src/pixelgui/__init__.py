"""
PixelGUI
========

Convert still images, GIFs and short videos into Lua scripts that rebuild the
picture as a grid of colored frames inside a Roblox ScreenGui.

Pipeline:
    - source: decode media and draw it onto a small scratch canvas
    - sampling: pick timestamps, capture, sharpen and deduplicate frames
    - encoding: serialize raster frames into compact numeric text
    - codegen: render the Lua script (static grid or animation driver)

Example:
    import asyncio
    from pixelgui.models import ConversionRequest
    from pixelgui.pipeline import convert_media

    request = ConversionRequest(width=48, height=27, max_frames=60)
    with open("clip.mp4", "rb") as f:
        result = asyncio.run(convert_media(f.read(), request, filename="clip.mp4"))

    print(result.filename, result.estimated_kb)
"""

from pixelgui.codegen import EmptySequenceError
from pixelgui.source import CanvasUnavailableError, SourceDecodeError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "SourceDecodeError",
    "CanvasUnavailableError",
    "EmptySequenceError",
]
