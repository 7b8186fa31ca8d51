"""
Grid Layout
===========

Layout descriptors consumed by the script renderer.

Both layout modes produce the same GridLayout shape; only the Lua
expressions differ:

    fixed:    cell size = pixel_size, holder = width*pixel_size x height*pixel_size
    viewport: cell size = min(viewport.X / width, viewport.Y / height),
              evaluated by the target runtime when the script runs

The holder is centered on screen in both modes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from pixelgui.models.generation import GenerationConfig


class LayoutMode(str, Enum):
    """How the grid cell size is chosen."""

    FIXED = "fixed"
    VIEWPORT = "viewport"


@dataclass(frozen=True, slots=True)
class GridLayout:
    """
    Lua expressions that place the grid.

    The renderer declares `w`, `ht` (grid size in cells) before the
    preamble, then `s` (cell size) from cell_size.

    Attributes:
        mode: Layout mode that produced this descriptor
        width: Grid width in cells
        height: Grid height in cells
        root_properties: Extra `sg.<prop>=<value>` assignments on the ScreenGui
        preamble: Lua statements evaluated before the cell size
        cell_size: Lua expression for the cell size
        holder_size: Lua UDim2 expression for the holder size
        holder_position: Lua UDim2 expression for the holder position
    """

    mode: LayoutMode
    width: int
    height: int
    root_properties: Tuple[str, ...]
    preamble: Tuple[str, ...]
    cell_size: str
    holder_size: str
    holder_position: str


def lua_number(value: Union[int, float]) -> str:
    """Format a number as a Lua literal, integers without a decimal point."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def fixed_layout(width: int, height: int, pixel_size: int) -> GridLayout:
    grid_width = width * pixel_size
    grid_height = height * pixel_size
    return GridLayout(
        mode=LayoutMode.FIXED,
        width=width,
        height=height,
        root_properties=(),
        preamble=(),
        cell_size=lua_number(pixel_size),
        holder_size=f"UDim2.new(0,{grid_width},0,{grid_height})",
        holder_position=(
            f"UDim2.new(0.5,-{lua_number(grid_width / 2)},"
            f"0.5,-{lua_number(grid_height / 2)})"
        ),
    )


def viewport_layout(width: int, height: int) -> GridLayout:
    return GridLayout(
        mode=LayoutMode.VIEWPORT,
        width=width,
        height=height,
        root_properties=("IgnoreGuiInset=true",),
        preamble=("local vp=workspace.CurrentCamera.ViewportSize",),
        cell_size="math.min(vp.X/w,vp.Y/ht)",
        holder_size="UDim2.new(0,w*s,0,ht*s)",
        holder_position="UDim2.new(0.5,-w*s/2,0.5,-ht*s/2)",
    )


def build_layout(config: GenerationConfig) -> GridLayout:
    """Select the layout variant for a generation config."""
    if config.viewport_scaling:
        return viewport_layout(config.width, config.height)
    return fixed_layout(config.width, config.height, config.pixel_size)
