"""
Lua Script Generator
====================

Renders frames + GenerationConfig into a Roblox LocalScript.

Script structure:
    1. ScreenGui named config.gui_name
    2. Holder frame sized/positioned by the GridLayout
    3. One Frame per grid cell, created once
    4a. Static (1 frame):  cell colors set from the (x,y,R,G,B) table
    4b. Animated (>1):     frame table + playback driver that recolors
                           the existing cells every 1/fps seconds

The script is opaque text here; only literal tables are guaranteed
well-formed (integer channels in [0, 255], quoted GUI name).
"""

import logging
from typing import List, Sequence, Union

from pixelgui.codegen.layout import GridLayout, build_layout
from pixelgui.encoding.pixels import encode_frames, encode_grid
from pixelgui.models.generation import GenerationConfig
from pixelgui.models.raster import FrameSequence, RasterFrame


logger = logging.getLogger(__name__)


# Cells created between yields to the target runtime
CELL_BATCH_SIZE = 50

_LUA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class EmptySequenceError(Exception):
    """Raised when a script is requested for zero frames."""
    pass


def quote_lua_string(value: str) -> str:
    """Quote `value` as a double-quoted Lua string literal."""
    parts = []
    for char in value:
        if char in _LUA_ESCAPES:
            parts.append(_LUA_ESCAPES[char])
        elif ord(char) < 32 or ord(char) == 127:
            parts.append(f"\\{ord(char):03d}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


class LuaScriptGenerator:
    """
    Shared template renderer for static and animated scripts.

    Example:
        generator = LuaScriptGenerator()
        script = generator.generate(frames, GenerationConfig(width=48, height=27))
    """

    def __init__(self, cell_batch_size: int = CELL_BATCH_SIZE) -> None:
        if cell_batch_size < 1:
            raise ValueError("cell_batch_size must be >= 1")
        self.cell_batch_size = cell_batch_size

    def generate(
        self,
        frames: Union[FrameSequence, Sequence[RasterFrame]],
        config: GenerationConfig,
    ) -> str:
        """
        Render the script text.

        Args:
            frames: Frames in playback order, all config.width x config.height
            config: Layout and playback parameters

        Returns:
            Lua source text

        Raises:
            EmptySequenceError: If there are no frames
            ValueError: If a frame size differs from the config grid size
        """
        frames = list(frames)
        if not frames:
            raise EmptySequenceError("Cannot generate a script from zero frames")

        for index, frame in enumerate(frames):
            if (frame.width, frame.height) != (config.width, config.height):
                raise ValueError(
                    f"Frame {index} is {frame.width}x{frame.height}, "
                    f"expected {config.width}x{config.height}"
                )

        layout = build_layout(config)
        lines = self._render_header(config, layout)

        if len(frames) == 1:
            lines.extend(self._render_static(frames[0]))
        else:
            lines.extend(self._render_animated(frames, config))

        script = "\n".join(lines) + "\n"
        logger.info(
            f"Generated script '{config.filename}': frames={len(frames)}, "
            f"layout={layout.mode.value}, bytes={len(script)}"
        )
        return script

    def _render_header(self, config: GenerationConfig, layout: GridLayout) -> List[str]:
        lines = [
            'local sg=Instance.new("ScreenGui")',
            f"sg.Name={quote_lua_string(config.gui_name)}",
            "sg.ResetOnSpawn=false",
        ]
        lines.extend(f"sg.{prop}" for prop in layout.root_properties)
        lines.extend([
            'sg.Parent=game.Players.LocalPlayer:WaitForChild("PlayerGui")',
            f"local w,ht={layout.width},{layout.height}",
        ])
        lines.extend(layout.preamble)
        lines.extend([
            f"local s={layout.cell_size}",
            'local h=Instance.new("Frame")',
            'h.Name="PixelHolder"',
            f"h.Size={layout.holder_size}",
            f"h.Position={layout.holder_position}",
            "h.BackgroundTransparency=1",
            "h.Parent=sg",
        ])
        return lines

    def _render_static(self, frame: RasterFrame) -> List[str]:
        return [
            f"local d={{{encode_grid(frame)}}}",
            "for i,c in ipairs(d)do",
            'local f=Instance.new("Frame")',
            "f.Size=UDim2.new(0,s,0,s)",
            "f.Position=UDim2.new(0,c[1]*s,0,c[2]*s)",
            "f.BackgroundColor3=Color3.fromRGB(c[3],c[4],c[5])",
            "f.BorderSizePixel=0",
            "f.Parent=h",
            f"if i%{self.cell_batch_size}==0 then task.wait()end",
            "end",
        ]

    def _render_animated(
        self,
        frames: List[RasterFrame],
        config: GenerationConfig,
    ) -> List[str]:
        lines = [
            "local px={}",
            "for y=0,ht-1 do",
            "for x=0,w-1 do",
            'local f=Instance.new("Frame")',
            "f.Size=UDim2.new(0,s,0,s)",
            "f.Position=UDim2.new(0,x*s,0,y*s)",
            "f.BackgroundColor3=Color3.new(0,0,0)",
            "f.BorderSizePixel=0",
            "f.Parent=h",
            "px[#px+1]=f",
            f"if #px%{self.cell_batch_size}==0 then task.wait()end",
            "end",
            "end",
            f"local fr={{{encode_frames(frames)}}}",
            f"local dt=1/{config.fps}",
            "local function show(f)",
            "for k,p in ipairs(px)do",
            "local o=(k-1)*3",
            "p.BackgroundColor3=Color3.fromRGB(f[o+1],f[o+2],f[o+3])",
            "end",
            "end",
            "task.spawn(function()",
        ]
        if config.loop:
            lines.extend([
                "local i=1",
                "while true do",
                "show(fr[i])",
                "task.wait(dt)",
                "i=i%#fr+1",
                "end",
            ])
        else:
            lines.extend([
                "for i=1,#fr do",
                "show(fr[i])",
                "task.wait(dt)",
                "end",
            ])
        lines.append("end)")
        return lines


def generate_script(
    frames: Union[FrameSequence, Sequence[RasterFrame]],
    config: GenerationConfig,
) -> str:
    """Render a script with the default generator."""
    return LuaScriptGenerator().generate(frames, config)
