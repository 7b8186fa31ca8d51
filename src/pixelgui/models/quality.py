"""
Quality Presets
===============

Fixed lookup from a named preset to its resampling/sharpening parameters.

    preset   smoothing   sharpen_strength
    low      off         0.0
    medium   on          0.25
    high     on          0.5
    ultra    on          0.8
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class QualityPreset(str, Enum):
    """Named quality preset, ordered from fastest to slowest."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ULTRA = "ultra"


@dataclass(frozen=True, slots=True)
class QualitySettings:
    """
    Per-frame filtering parameters.

    Attributes:
        smoothing: Use high-quality resampling at capture time
            (nearest-neighbour when off)
        sharpen_strength: Blend factor for the unsharp pass, in [0, 1]
    """

    smoothing: bool
    sharpen_strength: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.sharpen_strength <= 1.0:
            raise ValueError("sharpen_strength must be in [0, 1]")

    def to_dict(self) -> dict:
        return {
            "smoothing": self.smoothing,
            "sharpen_strength": self.sharpen_strength,
        }


QUALITY_PRESETS: Dict[QualityPreset, QualitySettings] = {
    QualityPreset.LOW: QualitySettings(smoothing=False, sharpen_strength=0.0),
    QualityPreset.MEDIUM: QualitySettings(smoothing=True, sharpen_strength=0.25),
    QualityPreset.HIGH: QualitySettings(smoothing=True, sharpen_strength=0.5),
    QualityPreset.ULTRA: QualitySettings(smoothing=True, sharpen_strength=0.8),
}


def get_quality_settings(preset: Union[QualityPreset, str]) -> QualitySettings:
    """
    Resolve a preset (enum or its string value) to its settings.

    Raises:
        ValueError: If the preset name is unknown
    """
    return QUALITY_PRESETS[QualityPreset(preset)]
