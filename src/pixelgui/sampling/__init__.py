"""
Sampling Module
===============

Frame capture and per-frame filtering.

This module provides:
    - FrameSampler: sequential seek-and-capture over a sampling plan
    - apply_quality / sharpen: quality preset post-processing
    - similarity / should_keep / FrameDeduplicator: near-duplicate removal
"""

from pixelgui.sampling.quality import SHARPEN_KERNEL, apply_quality, sharpen
from pixelgui.sampling.dedupe import (
    SIMILARITY_THRESHOLD,
    FrameDeduplicator,
    should_keep,
    similarity,
)
from pixelgui.sampling.sampler import FrameSampler, SamplingStats

__all__ = [
    # Sampler
    "FrameSampler",
    "SamplingStats",
    # Quality
    "SHARPEN_KERNEL",
    "apply_quality",
    "sharpen",
    # Dedup
    "SIMILARITY_THRESHOLD",
    "FrameDeduplicator",
    "should_keep",
    "similarity",
]
