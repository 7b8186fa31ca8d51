"""
Media Decoder
=============

Media kind detection and still-image decoding into RGBA numpy arrays.

Design Rules:
    - This is the ONLY place still images are decoded
    - Every decoded image is (H, W, 4) uint8 RGBA
    - Fails fast: anything undecodable raises SourceDecodeError
"""

import logging
import mimetypes
from enum import Enum
from typing import Optional

import cv2
import numpy as np


logger = logging.getLogger(__name__)


GIF_SIGNATURES = (b"GIF87a", b"GIF89a")


class SourceDecodeError(Exception):
    """Raised when media cannot be decoded or its metadata cannot be read."""
    pass


class MediaKind(str, Enum):
    """Kind of uploaded media, decides which source adapter is used."""

    IMAGE = "image"
    GIF = "gif"
    VIDEO = "video"


def detect_media_kind(
    data: bytes,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> MediaKind:
    """
    Classify uploaded media.

    Checks, in order: GIF signature, declared content type, filename extension.

    Raises:
        SourceDecodeError: If the media type is not an image or video
    """
    if data[:6] in GIF_SIGNATURES:
        return MediaKind.GIF

    mime = content_type
    if not mime or mime == "application/octet-stream":
        mime = mimetypes.guess_type(filename)[0] if filename else None

    if mime:
        if mime == "image/gif":
            return MediaKind.GIF
        if mime.startswith("image/"):
            return MediaKind.IMAGE
        if mime.startswith("video/"):
            return MediaKind.VIDEO

    raise SourceDecodeError(
        f"Unsupported media type: {mime or 'unknown'} "
        f"(filename={filename!r})"
    )


def to_rgba(image: np.ndarray, channel_order: str = "BGR") -> np.ndarray:
    """
    Normalize a decoded image to (H, W, 4) uint8 RGBA.

    Args:
        image: Grayscale (H, W), 3-channel or 4-channel uint8 image
        channel_order: "BGR" for OpenCV output, "RGB" for Pillow output

    Raises:
        SourceDecodeError: If the shape or dtype cannot be handled
    """
    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF: keep the high byte
        if image.dtype == np.uint16:
            image = (image >> 8).astype(np.uint8)
        else:
            raise SourceDecodeError(f"Unsupported pixel dtype: {image.dtype}")

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)

    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise SourceDecodeError(f"Unsupported image shape: {image.shape}")

    if channel_order == "BGR":
        code = cv2.COLOR_BGR2RGBA if image.shape[2] == 3 else cv2.COLOR_BGRA2RGBA
    else:
        code = cv2.COLOR_RGB2RGBA if image.shape[2] == 3 else None

    if code is None:
        return np.ascontiguousarray(image)
    return cv2.cvtColor(image, code)


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode still-image bytes (PNG, JPEG, BMP, WebP, ...) to RGBA.

    Args:
        data: Encoded image bytes

    Returns:
        RGBA image as np.ndarray (H, W, 4), dtype=uint8

    Raises:
        SourceDecodeError: If decoding fails or the image is invalid
    """
    if not data:
        raise SourceDecodeError("Empty image data")

    try:
        buffer = np.frombuffer(data, np.uint8)
        image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise SourceDecodeError(f"Image decode failed: {e}") from e

    if image is None:
        raise SourceDecodeError("Failed to decode image: cv2.imdecode returned None")

    rgba = to_rgba(image, channel_order="BGR")
    logger.debug(f"Decoded image: {rgba.shape[1]}x{rgba.shape[0]}")
    return rgba
