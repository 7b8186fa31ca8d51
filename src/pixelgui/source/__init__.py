"""
Source Module
=============

Raster Source Adapter: turns uploaded media into RGBA frames.

This module provides:
    - RasterSource: seek/read protocol driven by the sampler
    - StillImageSource, GifSource, VideoSource: concrete adapters
    - Canvas: reusable scratch surface captures are scaled onto
    - open_source: adapter selection from bytes + filename/content type

Example:
    from pixelgui.source import Canvas, open_source

    source = open_source(data, filename="clip.mp4")
    canvas = Canvas(48, 27)
"""

from pixelgui.source.decoder import (
    MediaKind,
    SourceDecodeError,
    decode_image,
    detect_media_kind,
)
from pixelgui.source.canvas import Canvas, CanvasUnavailableError
from pixelgui.source.base import RasterSource, StillImageSource
from pixelgui.source.gif import GifSource
from pixelgui.source.video import VideoSource
from pixelgui.source.factory import open_source


__all__ = [
    "SourceDecodeError",
    "CanvasUnavailableError",
    "MediaKind",
    "detect_media_kind",
    "decode_image",
    "Canvas",
    "RasterSource",
    "StillImageSource",
    "GifSource",
    "VideoSource",
    "open_source",
]
