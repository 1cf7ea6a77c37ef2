"""Tests for the static row-band partitioning."""

import pytest

from mandelband.computation import Complex, pixel_to_point
from mandelband.scheduling import Band, BandScheduler, band_corners, partition_bands, rows_per_band

SHAPES = [(3, 1), (10, 7), (5, 100), (4, 33), (1000, 750)]


def _coverage_cases():
    for width, height in SHAPES:
        for threads in range(1, min(height, 100) + 1):
            yield width, height, threads


@pytest.mark.parametrize("width, height, threads", list(_coverage_cases()))
def test_bands_cover_every_row_once(width, height, threads):
    bands = partition_bands((width, height), threads)
    rows = [row for band in bands for row in band.rows]
    assert rows == list(range(height))
    assert len(bands) <= threads
    assert all(band.height > 0 and band.width == width for band in bands)


@pytest.mark.parametrize("width, height, threads", list(_coverage_cases()))
def test_band_slices_tile_the_buffer(width, height, threads):
    bands = partition_bands((width, height), threads)
    assert bands[0].start == 0
    for previous, band in zip(bands, bands[1:]):
        assert previous.stop == band.start
    assert bands[-1].stop == width * height


def test_rows_per_band_truncates_then_adds_one():
    assert rows_per_band(750, 8) == 94
    assert rows_per_band(8, 8) == 2
    assert rows_per_band(7, 8) == 1
    assert rows_per_band(10, 1) == 11


def test_rows_per_band_rejects_no_threads():
    with pytest.raises(ValueError):
        rows_per_band(10, 0)


def test_last_band_holds_remainder():
    bands = partition_bands((1000, 750), 8)
    assert [band.height for band in bands] == [94] * 7 + [92]
    assert bands[-1] == Band(index=7, top=658, height=92, width=1000)


def test_fewer_bands_than_threads():
    # 8 // 8 + 1 == 2 rows per band, so only four bands are needed
    bands = partition_bands((3, 8), 8)
    assert len(bands) == 4
    assert [band.top for band in bands] == [0, 2, 4, 6]


def test_scheduler_corners_use_global_mapping():
    upper_left = Complex(-2.0, 1.0)
    lower_right = Complex(1.0, -1.0)
    scheduler = BandScheduler((64, 32), threads=8)
    assert scheduler.rows_per_band == 5

    band = scheduler.bands[2]
    band_upper_left, band_lower_right = scheduler.corners(band, upper_left, lower_right)
    assert band_upper_left == pixel_to_point((64, 32), (0, 10), upper_left, lower_right)
    assert band_lower_right == pixel_to_point((64, 32), (64, 15), upper_left, lower_right)
    assert band_upper_left == Complex(-2.0, 0.375)
    assert band_lower_right == Complex(1.0, 0.0625)


def test_scheduler_first_and_last_corners_match_rectangle():
    upper_left = Complex(-2.0, 1.0)
    lower_right = Complex(1.0, -1.0)
    scheduler = BandScheduler((64, 32), threads=3)
    first, _ = scheduler.corners(scheduler.bands[0], upper_left, lower_right)
    _, last = scheduler.corners(scheduler.bands[-1], upper_left, lower_right)
    assert first == upper_left
    assert last == lower_right


def test_band_corners_for_short_last_band():
    upper_left = Complex(-2.0, 1.0)
    lower_right = Complex(1.0, -1.0)
    last = partition_bands((64, 32), 8)[-1]
    assert (last.top, last.height) == (30, 2)
    assert band_corners(last, (64, 32), upper_left, lower_right) == (
        Complex(-2.0, -0.875),
        Complex(1.0, -1.0),
    )
