"""Tests for the command line interface.

Taichi is initialized once by the session fixture, so these tests call
run() with parsed arguments instead of main().
"""

import json

import pytest
from PIL import Image as PILImage

from phongtracer.cli import parse_args, run

SCENE = [
    {"type": "camera", "width": 2, "height": 2},
    {"type": "sphere", "position": [0, 0, 5], "radius": 1, "diffuse_color": [1, 1, 1]},
    {"type": "light", "position": [0, 100, 0], "color": [1, 1, 1], "radial-a0": 1},
]


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(SCENE), encoding="utf-8")
    return path


class TestParseArgs:
    """Tests for argument parsing."""

    def test_positional_and_defaults(self):
        """Test positional arguments and option defaults."""
        args = parse_args(["64", "48", "scene.json", "out.ppm"])
        assert (args.width, args.height) == (64, 48)
        assert args.input == "scene.json"
        assert args.output == "out.ppm"
        assert args.shadow_mode == "dim"
        assert args.shadow_test == "parametric"
        assert args.falloff == "linear"
        assert args.exponent == "exact"
        assert args.arch == "auto"
        assert not args.quiet

    @pytest.mark.parametrize("width", ["0", "-3", "ten"])
    def test_rejects_bad_sizes(self, width, capsys):
        """Test non-positive or non-integer sizes exit with status 2."""
        with pytest.raises(SystemExit) as excinfo:
            parse_args([width, "10", "scene.json", "out.ppm"])
        assert excinfo.value.code == 2

    def test_missing_arguments(self, capsys):
        """Test all four positional arguments are required."""
        with pytest.raises(SystemExit) as excinfo:
            parse_args(["10", "10", "scene.json"])
        assert excinfo.value.code == 2

    def test_rejects_unknown_shadow_mode(self, capsys):
        """Test option values are restricted to their choices."""
        with pytest.raises(SystemExit):
            parse_args(["10", "10", "s.json", "o.ppm", "--shadow-mode", "soft"])

    def test_shadow_test_option(self):
        """Test --shadow-test selects the segment test."""
        args = parse_args(["10", "10", "s.json", "o.ppm", "--shadow-test", "segment"])
        assert args.shadow_test == "segment"


class TestRun:
    """Tests for run()."""

    def test_renders_scene_to_ppm(self, tmp_path, scene_file, capsys):
        """Test a successful run writes the image and reports it."""
        output = tmp_path / "out.ppm"
        status = run(parse_args(["10", "8", str(scene_file), str(output)]))

        assert status == 0
        with PILImage.open(output) as img:
            assert img.format == "PPM"
            assert img.size == (10, 8)
        assert "Saved to:" in capsys.readouterr().out

    def test_quiet_prints_nothing(self, tmp_path, scene_file, capsys):
        """Test --quiet suppresses progress output."""
        output = tmp_path / "out.ppm"
        status = run(parse_args(["4", "4", str(scene_file), str(output), "--quiet"]))

        assert status == 0
        assert capsys.readouterr().out == ""

    def test_batched_progress(self, tmp_path, scene_file, capsys):
        """Test progress is reported per band."""
        output = tmp_path / "out.ppm"
        status = run(parse_args(["4", "6", str(scene_file), str(output), "--batch-rows", "3"]))

        assert status == 0
        out = capsys.readouterr().out
        assert "3/6 rows" in out
        assert "6/6 rows" in out

    def test_invalid_scene_fails_without_output(self, tmp_path, capsys):
        """Test an invalid scene exits 1, reports the error and writes nothing."""
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps(SCENE[1:]), encoding="utf-8")
        output = tmp_path / "out.ppm"

        status = run(parse_args(["4", "4", str(bad), str(output)]))

        assert status == 1
        assert "Error:" in capsys.readouterr().err
        assert not output.exists()

    def test_non_string_type_fails_cleanly(self, tmp_path, capsys):
        """Test a list-valued record type exits 1 with an error line."""
        bad = tmp_path / "bad.json"
        bad.write_text('[{"type": ["camera"]}]', encoding="utf-8")
        output = tmp_path / "out.ppm"

        status = run(parse_args(["4", "4", str(bad), str(output)]))

        assert status == 1
        assert "unknown type" in capsys.readouterr().err
        assert not output.exists()

    def test_missing_scene_file(self, tmp_path, capsys):
        """Test an unreadable scene file exits 1."""
        output = tmp_path / "out.ppm"
        status = run(parse_args(["4", "4", str(tmp_path / "nope.json"), str(output)]))

        assert status == 1
        assert "Could not open file" in capsys.readouterr().err

    def test_falloff_error_leaves_no_output(self, tmp_path, capsys):
        """Test a zero falloff denominator aborts before writing."""
        scene = [
            {"type": "camera", "width": 2, "height": 2},
            {"type": "plane", "position": [0, -1, 0], "normal": [0, 1, 0], "diffuse_color": [1, 1, 1]},
            {"type": "light", "position": [0, 5, 5], "color": [1, 1, 1], "radial-a1": 1, "radial-a2": -1},
        ]
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(scene), encoding="utf-8")
        output = tmp_path / "out.ppm"

        status = run(parse_args(["8", "8", str(path), str(output)]))

        assert status == 1
        assert "record 2 (light)" in capsys.readouterr().err
        assert not output.exists()

    def test_oversized_image(self, tmp_path, scene_file, capsys):
        """Test an image larger than the buffer exits 1."""
        output = tmp_path / "out.ppm"
        status = run(parse_args(["4096", "4", str(scene_file), str(output)]))

        assert status == 1
        assert "exceed maximum" in capsys.readouterr().err
