"""End-to-end tests for the random scene command-line script.

The script initializes Taichi itself, which would reset the fields of this
test session, so it is run in a separate process.
"""

import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


def _run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "examples.render_random_scene", "--arch", "cpu", *args],
        cwd=REPO_ROOT,
        capture_output=True,
        text=True,
        timeout=600,
    )


class TestArgumentParsing:
    """Tests for parse_args (no rendering)."""

    def test_defaults(self):
        from examples.render_random_scene import parse_args

        args = parse_args([])
        assert args.width == 200
        assert args.height == 100
        assert args.samples == 50
        assert args.max_depth == 50
        assert args.seed == 0
        assert args.scene_seed is None
        assert args.output == "random_scene.ppm"
        assert args.arch == "auto"
        assert not args.quiet

    def test_overrides(self):
        from examples.render_random_scene import parse_args

        args = parse_args(
            ["--width", "40", "--height", "20", "--samples", "3", "--scene-seed", "9", "--quiet"]
        )
        assert (args.width, args.height, args.samples, args.scene_seed) == (40, 20, 3, 9)
        assert args.quiet

    def test_invalid_arch(self):
        from examples.render_random_scene import parse_args

        with pytest.raises(SystemExit):
            parse_args(["--arch", "tpu"])


class TestRenderRandomSceneCLI:
    """Run the script end to end on a tiny image."""

    def test_writes_ppm_file(self, tmp_path):
        output = tmp_path / "spheres.ppm"
        result = _run_cli(
            "--width", "8", "--height", "4", "--samples", "1", "--max-depth", "5",
            "--scene-seed", "1", "--output", str(output), "--quiet",
        )
        assert result.returncode == 0, result.stderr

        lines = output.read_text(encoding="ascii").splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 8 * 4
        for line in lines[3:]:
            assert all(int(v) >= 0 for v in line.split())

    def test_ppm_to_stdout(self):
        result = _run_cli(
            "--width", "4", "--height", "2", "--samples", "1", "--max-depth", "3",
            "--scene-seed", "2", "--output", "-", "--quiet",
        )
        assert result.returncode == 0, result.stderr

        # Taichi may print its banner to stdout before the image
        text = result.stdout[result.stdout.index("P3\n"):]
        lines = text.splitlines()
        assert lines[1] == "4 2"
        assert len(lines) == 3 + 4 * 2

    def test_same_seeds_same_image(self, tmp_path):
        outputs = []
        for name in ("a.ppm", "b.ppm"):
            path = tmp_path / name
            result = _run_cli(
                "--width", "6", "--height", "3", "--samples", "2", "--max-depth", "5",
                "--seed", "4", "--scene-seed", "4", "--output", str(path), "--quiet",
            )
            assert result.returncode == 0, result.stderr
            outputs.append(path.read_text(encoding="ascii"))
        assert outputs[0] == outputs[1]

    def test_bad_size_fails(self, tmp_path):
        result = _run_cli("--width", "0", "--output", str(tmp_path / "x.ppm"), "--quiet")
        assert result.returncode == 1
        assert "Error" in result.stderr
