"""
Data Models
===========

Models shared across the conversion pipeline.

Models:
    Raster:
        - RasterFrame: Immutable RGBA pixel grid
        - FrameSequence: Same-size frames in playback order

    Quality:
        - QualityPreset: low / medium / high / ultra
        - QualitySettings: smoothing + sharpen strength

    Sampling:
        - SamplingOptions: quality, trim range, dedup flag
        - SamplingPlan: resolved capture timestamps

    Generation:
        - GenerationConfig: layout and playback of the generated script
        - ConversionRequest: everything a caller can tune
"""

from pixelgui.models.raster import FrameSequence, RasterFrame
from pixelgui.models.quality import (
    QUALITY_PRESETS,
    QualityPreset,
    QualitySettings,
    get_quality_settings,
)
from pixelgui.models.sampling import ASSUMED_SOURCE_FPS, SamplingOptions, SamplingPlan
from pixelgui.models.generation import ConversionRequest, GenerationConfig

__all__ = [
    # Raster
    "RasterFrame",
    "FrameSequence",
    # Quality
    "QualityPreset",
    "QualitySettings",
    "QUALITY_PRESETS",
    "get_quality_settings",
    # Sampling
    "ASSUMED_SOURCE_FPS",
    "SamplingOptions",
    "SamplingPlan",
    # Generation
    "GenerationConfig",
    "ConversionRequest",
]
