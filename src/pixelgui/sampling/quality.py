"""
Quality Filter Stage
====================

Per-frame post-processing after capture.

    smoothing=False: frame is returned as captured (nearest-neighbour scale)
    smoothing=True:  3x3 unsharp kernel, blended by sharpen_strength

Sharpening:
    kernel = [[ 0, -1,  0],
              [-1,  5, -1],
              [ 0, -1,  0]]

    out = original + (convolved - original) * strength

    Applied to R, G, B independently. Only pixels with a full 3x3
    neighbourhood are touched, the outermost ring is copied unchanged.
    Results are rounded half-to-even and clamped to [0, 255].
    Alpha is always 255 on output.
"""

import logging

import cv2
import numpy as np

from pixelgui.models.quality import QualitySettings
from pixelgui.models.raster import RasterFrame


logger = logging.getLogger(__name__)


SHARPEN_KERNEL = np.array(
    [
        [0, -1, 0],
        [-1, 5, -1],
        [0, -1, 0],
    ],
    dtype=np.float32,
)


def sharpen(rgb: np.ndarray, strength: float) -> np.ndarray:
    """
    Blend an unsharp-kernel pass into an RGB image.

    Args:
        rgb: (H, W, 3) uint8 image
        strength: Blend factor in [0, 1]

    Returns:
        New (H, W, 3) uint8 image, border ring identical to the input
    """
    result = rgb.copy()
    height, width = rgb.shape[:2]
    if strength <= 0 or height < 3 or width < 3:
        return result

    original = rgb.astype(np.float32)
    convolved = cv2.filter2D(original, -1, SHARPEN_KERNEL, borderType=cv2.BORDER_REPLICATE)

    inner_original = original[1:-1, 1:-1].astype(np.float64)
    inner_convolved = convolved[1:-1, 1:-1].astype(np.float64)
    blended = inner_original + (inner_convolved - inner_original) * strength

    result[1:-1, 1:-1] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    return result


def apply_quality(frame: RasterFrame, settings: QualitySettings) -> RasterFrame:
    """
    Apply the quality preset's post-capture filtering to one frame.

    Deterministic: the same frame and settings always give identical bytes.

    Args:
        frame: Captured frame
        settings: Quality settings for this run

    Returns:
        New RasterFrame with alpha forced to 255
    """
    pixels = np.empty_like(frame.pixels)

    if settings.smoothing and settings.sharpen_strength > 0:
        pixels[..., :3] = sharpen(frame.rgb, settings.sharpen_strength)
    else:
        pixels[..., :3] = frame.rgb

    pixels[..., 3] = 255
    return RasterFrame(width=frame.width, height=frame.height, pixels=pixels)
