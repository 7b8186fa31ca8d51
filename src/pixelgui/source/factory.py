"""
Source Factory
==============

Pick the source adapter for uploaded media bytes.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pixelgui.source.base import StillImageSource
from pixelgui.source.decoder import MediaKind, detect_media_kind
from pixelgui.source.gif import GifSource
from pixelgui.source.video import VideoSource


logger = logging.getLogger(__name__)


AnySource = Union[StillImageSource, GifSource, VideoSource]


def open_source(
    data: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> AnySource:
    """
    Open media bytes as a RasterSource.

    Single-frame GIFs come back as StillImageSource. Callers should
    close() the returned source when done.

    Raises:
        SourceDecodeError: If the media kind is unsupported or decoding fails
    """
    kind = detect_media_kind(data, filename=filename, content_type=content_type)
    logger.info(f"Opening {kind.value} source: {filename or '<bytes>'} ({len(data)} bytes)")

    if kind == MediaKind.IMAGE:
        return StillImageSource.from_bytes(data)

    if kind == MediaKind.GIF:
        gif = GifSource(data)
        if gif.frame_count == 1:
            still = StillImageSource(gif.first_frame())
            gif.close()
            return still
        return gif

    suffix = Path(filename).suffix if filename and Path(filename).suffix else ".mp4"
    return VideoSource.from_bytes(data, suffix=suffix)
