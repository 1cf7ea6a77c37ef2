"""End-to-end tests via main.py."""
import os
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from mandelband.computation import Complex, allocate_pixels, render
from mandelband.config import default_render_config

ROOT = Path(__file__).resolve().parents[1]


def _run(*args):
    env = {
        **os.environ,
        "SKIP_MLFLOW": "1",
        "PYTHONPATH": os.pathsep.join(filter(None, [str(ROOT / "src"), os.environ.get("PYTHONPATH")])),
    }
    return subprocess.run(
        [sys.executable, str(ROOT / "main.py"), *args],
        env=env,
        cwd=ROOT,
        capture_output=True,
        text=True,
        timeout=120,
    )


def test_direct_render(tmp_path):
    config = default_render_config(
        width=64,
        height=32,
        upper_left="-2,1",
        lower_right="1,-1",
        threads=4,
        output=str(tmp_path / "mandel.png"),
    )
    result = _run(*config.to_cli_args())
    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"

    expected = allocate_pixels(config.bounds)
    render(expected, config.bounds, config.upper_left, config.lower_right)
    with Image.open(config.output_path) as image:
        np.testing.assert_array_equal(np.asarray(image), expected.reshape(32, 64))


@pytest.mark.parametrize(
    "layout",
    [
        lambda out: [out, "64x32", "-2,1", "1,-1", "--threads=4"],
        lambda out: ["--threads", "4", out, "64x32", "-2,1", "1,-1"],
        lambda out: [out, "64x32", "--threads=4", "-2.0,1.0", "1,-1"],
    ],
    ids=["options-last", "options-first", "options-between"],
)
def test_negative_corners_need_no_separator(tmp_path, layout):
    out = tmp_path / "mandel.png"
    result = _run(*layout(str(out)))
    assert result.returncode == 0, f"Render failed:\n{result.stdout}\n{result.stderr}"

    expected = allocate_pixels((64, 32))
    render(expected, (64, 32), Complex(-2.0, 1.0), Complex(1.0, -1.0))
    with Image.open(out) as image:
        np.testing.assert_array_equal(np.asarray(image), expected.reshape(32, 64))
    assert "threads=4" in result.stdout


def test_unknown_option_is_rejected(tmp_path):
    result = _run(str(tmp_path / "x.png"), "64x32", "-2,1", "1,-1", "--bogus")
    assert result.returncode == 2
    assert "unrecognized arguments: --bogus" in result.stderr


def test_missing_arguments_print_usage():
    result = _run("--threads=2")
    assert result.returncode != 0
    assert "Usage:" in result.stderr


def test_malformed_corner_is_reported(tmp_path):
    result = _run("--", str(tmp_path / "x.png"), "64x32", "oops", "1,-1")
    assert result.returncode != 0
    assert "ERROR" in result.stderr
    assert not (tmp_path / "x.png").exists()


def test_sweep_suite(tmp_path):
    sweep = tmp_path / "sweep.yaml"
    sweep.write_text(
        "defaults:\n"
        f"  output_dir: {tmp_path / 'out'}\n"
        "  upper_left: '-2.0,1.0'\n"
        "  lower_right: '1.0,-1.0'\n"
        "experiments:\n"
        "  - name: TESTS\n"
        "    sweep:\n"
        "      threads: [1, 3]\n"
        "      image_shape: '16x8'\n"
    )
    result = _run("--sweep", str(sweep), "--suite", "TESTS")
    assert result.returncode == 0, f"Suite failed:\n{result.stdout}\n{result.stderr}"
    assert len(list((tmp_path / "out").glob("*.png"))) == 2

    listing = _run("--sweep", str(sweep), "--list-suites")
    assert "TESTS: 2 configurations" in listing.stdout
