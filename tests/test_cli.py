"""
CLI Tests
=========
"""

from pixelgui.cli import main


def write_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("defaults:\n  gui_name: CliGUI\n")
    return str(path)


class TestConvertCommand:
    """Tests for `pixelgui convert`."""

    def test_writes_script(self, tmp_path, two_pixel_png, capsys):
        """Convert writes <gui_name>.lua into the output directory."""
        image = tmp_path / "art.png"
        image.write_bytes(two_pixel_png)
        out_dir = tmp_path / "out"

        code = main([
            "--config", write_config(tmp_path),
            "convert", str(image),
            "-o", str(out_dir),
            "--width", "2", "--height", "1",
            "--quality", "low",
        ])

        assert code == 0
        script = (out_dir / "CliGUI.lua").read_text(encoding="utf-8")
        assert "{0,0,10,20,30},{1,0,200,210,220}" in script
        assert "CliGUI.lua" in capsys.readouterr().out

    def test_gif_without_loop(self, tmp_path, animated_gif):
        """--no-loop produces a single-pass driver."""
        clip = tmp_path / "clip.gif"
        clip.write_bytes(animated_gif)

        code = main([
            "--config", write_config(tmp_path),
            "convert", str(clip),
            "-o", str(tmp_path),
            "--width", "8", "--height", "8",
            "--max-frames", "3", "--no-loop",
        ])

        assert code == 0
        assert "for i=1,#fr do" in (tmp_path / "CliGUI.lua").read_text(encoding="utf-8")

    def test_invalid_option(self, tmp_path, two_pixel_png):
        """Out-of-range options exit with status 2."""
        image = tmp_path / "art.png"
        image.write_bytes(two_pixel_png)
        code = main(["--config", write_config(tmp_path), "convert", str(image), "--width", "0"])
        assert code == 2

    def test_missing_input(self, tmp_path):
        """A missing input file exits with status 1."""
        code = main(["--config", write_config(tmp_path), "convert", str(tmp_path / "nope.png")])
        assert code == 1

    def test_undecodable_input(self, tmp_path):
        """Undecodable input exits with status 1."""
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"garbage")
        code = main(["--config", write_config(tmp_path), "convert", str(broken)])
        assert code == 1


def test_estimate(tmp_path, capsys):
    """Estimate prints the size in KB."""
    code = main(["--config", write_config(tmp_path), "estimate", "--frames", "10", "--width", "48", "--height", "48"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "~70 KB"
