"""
PixelGUI Command Line
=====================

Usage:
    pixelgui convert clip.mp4 --width 64 --height 36 --quality ultra
    pixelgui convert logo.png --width 32 --height 32 --gui-name Logo -o out/
    pixelgui estimate --frames 120 --width 64 --height 36
    pixelgui serve --port 8080

Unset options fall back to the `defaults` section of config.yaml.
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from pixelgui import __version__
from pixelgui.codegen import EmptySequenceError
from pixelgui.config import load_config, setup_logging
from pixelgui.encoding import estimate_size
from pixelgui.models import ConversionRequest, QualityPreset
from pixelgui.pipeline import convert_media
from pixelgui.source import CanvasUnavailableError, SourceDecodeError


logger = logging.getLogger(__name__)


# Request fields that map 1:1 onto CLI options
_REQUEST_OPTIONS = (
    "width",
    "height",
    "pixel_size",
    "fps",
    "max_frames",
    "quality",
    "start_frame",
    "end_frame",
    "deduplicate",
    "loop",
    "viewport_scaling",
    "gui_name",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelgui",
        description="Convert images and videos into Roblox pixel-grid Lua scripts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search working directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Convert a media file to a .lua script")
    convert.add_argument("input", type=Path, help="Image, GIF or video file")
    convert.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for <gui-name>.lua (default: current directory)",
    )
    convert.add_argument("--width", type=int, help="Grid width in cells")
    convert.add_argument("--height", type=int, help="Grid height in cells")
    convert.add_argument("--pixel-size", type=int, help="Cell size in GUI pixels")
    convert.add_argument("--fps", type=int, help="Playback frames per second")
    convert.add_argument("--max-frames", type=int, help="Frame cap")
    convert.add_argument(
        "--quality",
        choices=[preset.value for preset in QualityPreset],
        help="Quality preset",
    )
    convert.add_argument("--start-frame", type=int, help="Trim start frame (30 fps timeline)")
    convert.add_argument("--end-frame", type=int, help="Trim end frame (30 fps timeline)")
    convert.add_argument(
        "--deduplicate",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Drop near-duplicate consecutive frames",
    )
    convert.add_argument(
        "--loop",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Loop the animation",
    )
    convert.add_argument(
        "--viewport-scaling",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Fit the grid to the player's viewport",
    )
    convert.add_argument("--gui-name", type=str, help="ScreenGui name and output file stem")

    estimate = subparsers.add_parser("estimate", help="Estimate script size in KB")
    estimate.add_argument("--frames", type=int, required=True, help="Frame count")
    estimate.add_argument("--width", type=int, required=True, help="Grid width in cells")
    estimate.add_argument("--height", type=int, required=True, help="Grid height in cells")

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", type=str, default=None, help="Bind host")
    serve.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def run_convert(args: argparse.Namespace, settings) -> int:
    overrides = {
        name: getattr(args, name)
        for name in _REQUEST_OPTIONS
        if getattr(args, name) is not None
    }
    try:
        request = ConversionRequest.model_validate(
            {**settings.defaults.model_dump(), **overrides}
        )
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 2

    try:
        data = args.input.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    content_type = mimetypes.guess_type(args.input.name)[0]
    try:
        result = asyncio.run(convert_media(
            data,
            request,
            filename=args.input.name,
            content_type=content_type,
        ))
    except (SourceDecodeError, CanvasUnavailableError, EmptySequenceError) as e:
        logger.error(f"Conversion failed: {e}")
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    output_path = args.output_dir / result.filename
    output_path.write_text(result.script, encoding="utf-8")

    print(
        f"Wrote {output_path} ({result.frame_count} frame(s), "
        f"{result.width}x{result.height}, ~{result.estimated_kb} KB)"
    )
    return 0


def run_estimate(args: argparse.Namespace) -> int:
    try:
        kilobytes = estimate_size(args.frames, args.width, args.height)
    except ValueError as e:
        logger.error(str(e))
        return 2
    print(f"~{kilobytes} KB")
    return 0


def run_serve(args: argparse.Namespace, settings) -> int:
    import uvicorn

    uvicorn.run(
        "pixelgui.main:app",
        host=args.host or settings.server.host,
        port=args.port or settings.server.port,
        reload=False,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_config(args.config)
    setup_logging(settings)

    if args.command == "convert":
        return run_convert(args, settings)
    if args.command == "estimate":
        return run_estimate(args)
    return run_serve(args, settings)


if __name__ == "__main__":
    sys.exit(main())
