"""
Generation Models
=================

Pydantic models describing what to generate.

GenerationConfig is consumed once per generate call by the code generator.
ConversionRequest is the full user-facing parameter set accepted by the
HTTP and CLI surfaces; it splits into SamplingOptions + GenerationConfig.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from pixelgui.models.quality import QualityPreset
from pixelgui.models.sampling import SamplingOptions


MAX_WIDTH = 854
MAX_HEIGHT = 480
MAX_FRAMES = 300


class GenerationConfig(BaseModel):
    """
    Layout and playback parameters for one generated script.

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        pixel_size: Rendered cell size in GUI pixels (fixed layout)
        gui_name: Name of the root ScreenGui, emitted as a quoted string
        fps: Animation playback rate
        loop: Repeat the animation forever instead of playing once
        viewport_scaling: Scale the grid to the viewport at run time
    """

    width: int = Field(..., ge=1, le=MAX_WIDTH, description="Grid width in cells")
    height: int = Field(..., ge=1, le=MAX_HEIGHT, description="Grid height in cells")
    pixel_size: int = Field(default=10, ge=1, le=100, description="Cell size in GUI pixels")
    gui_name: str = Field(
        default="PixelArtGUI",
        min_length=1,
        max_length=100,
        description="ScreenGui name",
    )
    fps: int = Field(default=30, ge=1, le=60, description="Playback frames per second")
    loop: bool = Field(default=True, description="Loop the animation")
    viewport_scaling: bool = Field(
        default=False,
        description="Fit the grid to the viewport instead of using pixel_size",
    )

    @property
    def filename(self) -> str:
        """Output file name for the generated script."""
        return f"{self.gui_name}.lua"


class ConversionRequest(BaseModel):
    """
    All tunable parameters for one media conversion.

    Bounds mirror what the upload form allows; values outside them are
    rejected with a validation error.
    """

    width: int = Field(default=48, ge=1, le=MAX_WIDTH, description="Output width in cells")
    height: int = Field(default=48, ge=1, le=MAX_HEIGHT, description="Output height in cells")
    pixel_size: int = Field(default=10, ge=1, le=100, description="Cell size in GUI pixels")
    fps: int = Field(default=30, ge=1, le=60, description="Playback frames per second")
    max_frames: int = Field(default=30, ge=1, le=MAX_FRAMES, description="Frame cap")
    quality: QualityPreset = Field(default=QualityPreset.HIGH, description="Quality preset")
    start_frame: int = Field(default=0, ge=0, description="Trim start frame (30 fps)")
    end_frame: Optional[int] = Field(default=None, ge=0, description="Trim end frame (30 fps)")
    deduplicate: bool = Field(default=False, description="Drop near-duplicate frames")
    loop: bool = Field(default=True, description="Loop the animation")
    viewport_scaling: bool = Field(default=False, description="Fit grid to viewport")
    gui_name: str = Field(
        default="PixelArtGUI",
        min_length=1,
        max_length=100,
        description="ScreenGui name",
    )

    @model_validator(mode="after")
    def _check_trim(self) -> "ConversionRequest":
        if self.end_frame and self.start_frame >= self.end_frame:
            raise ValueError("start_frame must be before end_frame")
        return self

    def to_sampling_options(self) -> SamplingOptions:
        return SamplingOptions(
            quality=self.quality,
            start_frame=self.start_frame,
            end_frame=self.end_frame,
            deduplicate=self.deduplicate,
        )

    def to_generation_config(self) -> GenerationConfig:
        return GenerationConfig(
            width=self.width,
            height=self.height,
            pixel_size=self.pixel_size,
            gui_name=self.gui_name,
            fps=self.fps,
            loop=self.loop,
            viewport_scaling=self.viewport_scaling,
        )
