"""
Pipeline Tests
==============

End-to-end conversion from media bytes to script text.
"""

import asyncio
import threading

import pytest

from pixelgui.models import ConversionRequest, QualityPreset
from pixelgui.pipeline import convert_media, convert_source
from pixelgui.source import SourceDecodeError, open_source
from pixelgui.codegen import EmptySequenceError, LuaScriptGenerator


def convert(data, **params):
    filename = params.pop("filename", None)
    request = ConversionRequest(**params)
    return asyncio.run(convert_media(data, request, filename=filename))


class TestConvertMedia:
    """Tests for convert_media."""

    def test_still_image(self, two_pixel_png):
        """A PNG becomes a static script."""
        result = convert(
            two_pixel_png,
            filename="art.png",
            width=2,
            height=1,
            quality=QualityPreset.LOW,
            gui_name="Art",
        )
        assert result.filename == "Art.lua"
        assert result.frame_count == 1
        assert not result.is_animated
        assert result.stats is None
        assert "{0,0,10,20,30},{1,0,200,210,220}" in result.script

    def test_animated_gif(self, animated_gif):
        """A GIF becomes an animated script."""
        result = convert(animated_gif, width=8, height=8, max_frames=6, quality=QualityPreset.LOW)
        assert result.is_animated
        assert result.frame_count == 6
        assert result.stats.captured == 6
        assert "task.spawn(function()" in result.script
        assert result.estimated_kb == 4  # ceil((6*8*8*3 + 2000) / 1024)

    def test_animated_gif_dedup(self, animated_gif):
        """Dedup keeps one frame per distinct GIF frame."""
        result = convert(
            animated_gif,
            width=8,
            height=8,
            max_frames=18,
            quality=QualityPreset.LOW,
            deduplicate=True,
        )
        # three solid colors -> one kept frame per color
        assert result.frame_count == 3
        assert result.stats.dropped == 15

    def test_summary_excludes_script(self, two_pixel_png):
        """The summary omits the script body."""
        summary = convert(two_pixel_png, filename="a.png", width=2, height=1).to_dict()
        assert "script" not in summary
        assert summary["bytes"] > 0

    def test_unsupported_media(self):
        """Unsupported media raise SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            convert(b"plain text", filename="notes.txt")


class TestConvertSource:
    """Tests for convert_source with in-memory sources."""

    def test_empty_source_rejected(self, fake_source):
        """A zero-length source yields no script."""
        with pytest.raises(EmptySequenceError):
            asyncio.run(convert_source(fake_source(duration=0.0), ConversionRequest()))

    def test_two_second_clip(self, fake_source):
        """A two second clip is sampled every 0.2 s."""
        request = ConversionRequest(width=16, height=9, max_frames=10, quality=QualityPreset.LOW)
        result = asyncio.run(convert_source(fake_source(duration=2.0), request))
        assert result.frame_count == 10
        assert result.stats.plan.interval == pytest.approx(0.2)

    def test_rendering_runs_off_event_loop_thread(self, two_pixel_png):
        """Script rendering runs in a worker thread."""
        loop_threads = []
        render_threads = []

        class RecordingGenerator(LuaScriptGenerator):
            def generate(self, frames, config):
                render_threads.append(threading.get_ident())
                return super().generate(frames, config)

        async def run():
            loop_threads.append(threading.get_ident())
            source = open_source(two_pixel_png, filename="art.png")
            try:
                return await convert_source(
                    source,
                    ConversionRequest(width=2, height=1),
                    generator=RecordingGenerator(),
                )
            finally:
                source.close()

        result = asyncio.run(run())
        assert result.frame_count == 1
        assert render_threads and render_threads[0] != loop_threads[0]
