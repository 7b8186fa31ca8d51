"""
Source Adapter Tests
====================

Media detection, still-image decoding, GIF timeline, canvas and video.
"""

import asyncio

import cv2
import numpy as np
import pytest

from pixelgui.source import (
    Canvas,
    CanvasUnavailableError,
    GifSource,
    MediaKind,
    SourceDecodeError,
    StillImageSource,
    VideoSource,
    decode_image,
    detect_media_kind,
    open_source,
)
from pixelgui.models import QualityPreset, SamplingOptions
from pixelgui.sampling import FrameSampler
from pixelgui.source.video import frame_index


class TestDetectMediaKind:
    """Tests for media kind detection."""

    def test_gif_signature_wins(self, animated_gif):
        """GIF magic bytes win over the declared type."""
        assert detect_media_kind(animated_gif, content_type="image/png") == MediaKind.GIF

    @pytest.mark.parametrize(
        "content_type, expected",
        [
            ("image/png", MediaKind.IMAGE),
            ("image/jpeg", MediaKind.IMAGE),
            ("image/gif", MediaKind.GIF),
            ("video/mp4", MediaKind.VIDEO),
            ("video/webm", MediaKind.VIDEO),
        ],
    )
    def test_content_type(self, content_type, expected):
        """Content type selects the media kind."""
        assert detect_media_kind(b"\x00" * 16, content_type=content_type) == expected

    def test_filename_fallback(self):
        """The extension is used when the type is generic."""
        kind = detect_media_kind(b"\x00" * 16, filename="clip.mp4", content_type="application/octet-stream")
        assert kind == MediaKind.VIDEO

    def test_unsupported(self):
        """Unsupported media raise SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            detect_media_kind(b"hello", filename="notes.txt")


class TestDecodeImage:
    """Tests for still-image decoding."""

    def test_png_channel_order(self, two_pixel_png):
        """Decoded PNGs are RGBA."""
        rgba = decode_image(two_pixel_png)
        assert rgba.shape == (1, 2, 4)
        assert rgba[0, 0].tolist() == [10, 20, 30, 255]
        assert rgba[0, 1].tolist() == [200, 210, 220, 255]

    def test_grayscale(self):
        """Grayscale images expand to RGBA."""
        ok, encoded = cv2.imencode(".png", np.full((3, 3), 77, dtype=np.uint8))
        assert ok
        rgba = decode_image(encoded.tobytes())
        assert rgba[1, 1].tolist() == [77, 77, 77, 255]

    def test_garbage(self):
        """Garbage bytes raise SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            decode_image(b"definitely not an image")

    def test_empty(self):
        """Empty data raises SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            decode_image(b"")


class TestGifSource:
    """Tests for the animated GIF timeline."""

    def test_metadata(self, animated_gif):
        """Frame count, delays and duration are read."""
        gif = GifSource(animated_gif)
        assert gif.frame_count == 3
        assert gif.delays_ms == [100, 200, 300]
        assert gif.duration == pytest.approx(0.6)

    @pytest.mark.parametrize(
        "timestamp, index",
        [
            (0.0, 0),
            (0.099, 0),
            (0.1, 1),
            (0.09999999999999999, 1),
            (0.29, 1),
            (0.35, 2),
            (10.0, 2),
        ],
    )
    def test_frame_index_at(self, animated_gif, timestamp, index):
        """Timestamps map to the frame on screen."""
        assert GifSource(animated_gif).frame_index_at(timestamp) == index

    def test_seek_and_read(self, animated_gif):
        """Seek selects the displayed frame."""
        gif = GifSource(animated_gif)
        asyncio.run(gif.seek(0.45))
        assert gif.read()[0, 0].tolist() == [0, 0, 255, 255]

    def test_seek_backwards_and_forwards(self, animated_gif):
        """Frames decode correctly in any seek order."""
        gif = GifSource(animated_gif)
        colors = []
        for timestamp in (0.45, 0.0, 0.15, 0.45, 0.05, 0.2):
            asyncio.run(gif.seek(timestamp))
            colors.append(gif.read()[0, 0, :3].tolist())
        red, green, blue = [255, 0, 0], [0, 255, 0], [0, 0, 255]
        assert colors == [blue, red, green, blue, red, green]

    def test_close_releases_image(self, animated_gif):
        """Closing drops the decoded frame."""
        gif = GifSource(animated_gif)
        gif.read()
        gif.close()
        assert gif._loaded is None

    def test_corrupt(self):
        """Corrupt GIF data raises SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            GifSource(b"GIF89a" + b"\x00" * 10)


class TestOpenSource:
    """Tests for adapter selection."""

    def test_png_is_still(self, two_pixel_png):
        """PNGs open as still sources."""
        source = open_source(two_pixel_png, filename="art.png")
        assert isinstance(source, StillImageSource)
        assert source.duration == 0.0
        assert source.native_size == (2, 1)

    def test_animated_gif(self, animated_gif):
        """Animated GIFs open as GIF sources."""
        assert isinstance(open_source(animated_gif, filename="a.gif"), GifSource)

    def test_single_frame_gif_is_still(self):
        """Single-frame GIFs open as still sources."""
        from PIL import Image
        import io

        buffer = io.BytesIO()
        Image.new("RGB", (4, 4), (9, 9, 9)).save(buffer, format="GIF")
        assert isinstance(open_source(buffer.getvalue()), StillImageSource)

    def test_undecodable_video(self):
        """Undecodable video raises SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            open_source(b"\x00" * 64, filename="broken.mp4")


class TestCanvas:
    """Tests for the scratch canvas."""

    def test_nearest_downscale(self):
        """Nearest resize picks source pixels."""
        image = np.zeros((4, 4, 4), dtype=np.uint8)
        image[:2, :2] = (255, 0, 0, 255)
        canvas = Canvas(2, 2)
        canvas.draw(image, smoothing=False)
        pixels = canvas.read_pixels()
        assert pixels[0, 0].tolist() == [255, 0, 0, 255]
        assert pixels[1, 1].tolist() == [0, 0, 0, 0]

    def test_smoothing_averages(self):
        """Smoothing blends neighbouring pixels."""
        image = np.zeros((2, 2, 4), dtype=np.uint8)
        image[0, 0] = (200, 200, 200, 255)
        canvas = Canvas(1, 1)
        canvas.draw(image, smoothing=True)
        assert canvas.read_pixels()[0, 0, 0] == 50

    def test_read_pixels_is_a_copy(self):
        """read_pixels returns an independent copy."""
        canvas = Canvas(2, 2)
        canvas.draw(np.full((2, 2, 4), 10, dtype=np.uint8), smoothing=False)
        first = canvas.read_pixels()
        canvas.draw(np.full((2, 2, 4), 99, dtype=np.uint8), smoothing=False)
        assert first[0, 0, 0] == 10

    @pytest.mark.parametrize("size", [(0, 4), (4, 0), (-1, 4), (5000, 4)])
    def test_unavailable(self, size):
        """Invalid canvas sizes raise CanvasUnavailableError."""
        with pytest.raises(CanvasUnavailableError):
            Canvas(*size)


class TestVideoSource:
    """Tests for OpenCV video decoding."""

    @pytest.fixture
    def video_path(self, tmp_path):
        path = tmp_path / "clip.avi"
        writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 30.0, (32, 24))
        if not writer.isOpened():
            pytest.skip("MJPG video writer unavailable")
        for index in range(30):
            frame = np.full((24, 32, 3), index * 8, dtype=np.uint8)
            writer.write(frame)
        writer.release()
        return path

    def test_metadata_and_seek(self, video_path):
        """Duration is read and seeks decode RGBA frames."""
        with VideoSource(video_path) as source:
            assert source.duration == pytest.approx(1.0, abs=0.1)
            asyncio.run(source.seek(0.5))
            frame = source.read()
            assert frame.shape == (24, 32, 4)
            assert (frame[..., 3] == 255).all()

    def test_from_bytes_removes_temp_file(self, video_path):
        """Owned temp files are removed on close."""
        source = VideoSource.from_bytes(video_path.read_bytes(), suffix=".avi")
        temp_path = source.path
        assert temp_path.exists()
        source.close()
        assert not temp_path.exists()

    def test_read_before_seek(self, video_path):
        """Reading before any seek raises."""
        with VideoSource(video_path) as source:
            with pytest.raises(SourceDecodeError):
                source.read()

    def test_missing_file(self, tmp_path):
        """Missing files raise SourceDecodeError."""
        with pytest.raises(SourceDecodeError):
            VideoSource(tmp_path / "missing.mp4")

    def test_evenly_spaced_samples_hit_frame_boundaries(self, video_path):
        """Sampled timestamps decode the boundary frame, not the one before."""
        options = SamplingOptions(quality=QualityPreset.LOW, start_frame=0, end_frame=9)
        with VideoSource(video_path) as source:
            frames = asyncio.run(
                FrameSampler().sample(source, 4, 4, max_frames=3, options=options)
            )
        # frame i is filled with i * 8, MJPG may shift values slightly
        indices = [round(int(frame.pixels[2, 2, 0]) / 8) for frame in frames]
        assert indices == [0, 3, 6]


class TestFrameIndex:
    """Tests for media time to frame position."""

    @pytest.mark.parametrize(
        "timestamp, fps, expected",
        [
            (0.0, 30, 0),
            (0.09999999999999999, 30, 3),
            (0.19999999999999998, 30, 6),
            (0.0999, 30, 2),
            (1 / 30 * 7, 30, 7),
            (0.5, 25, 12),
        ],
    )
    def test_snaps_float_noise(self, timestamp, fps, expected):
        """Float noise below a microsecond does not move the frame back."""
        assert frame_index(timestamp, fps) == expected
