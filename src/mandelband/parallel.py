"""Thread-per-band rendering of the Mandelbrot raster."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Tuple

import numpy as np

from .computation import ITERATION_LIMIT, Complex, check_buffer, render_rows
from .report import RenderReport
from .scheduling import DEFAULT_THREADS, Band, BandScheduler

__all__ = ["render_parallel"]


def _band_log(index: int, message: str) -> None:
    """Emit a progress message from a given band worker."""
    print(f"[Band {index}] {message}", flush=True)


def _band_record(
    band: Band,
    corners: Tuple[Complex, Complex],
    thread_name: str,
    comp_time: float,
) -> Dict[str, Any]:
    """Create a uniform band metadata record."""
    return {
        "band": band.index,
        "top_row": band.top,
        "rows": band.height,
        "upper_left": str(corners[0]),
        "lower_right": str(corners[1]),
        "thread": thread_name,
        "comp_time": comp_time,
    }


def _render_band_timed(
    band_pixels: np.ndarray,
    band: Band,
    bounds: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
    limit: int,
) -> Tuple[float, str]:
    """Render one band into its own slice and return its compute time and thread."""
    comp_start = time.perf_counter()
    render_rows(band_pixels, bounds, band.top, band.height, upper_left, lower_right, limit)
    comp_time = time.perf_counter() - comp_start
    _band_log(
        band.index,
        f"Rendered rows {band.top}:{band.top + band.height} in {comp_time:.4f}s",
    )
    return comp_time, threading.current_thread().name


def render_parallel(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
    threads: int = DEFAULT_THREADS,
    limit: int = ITERATION_LIMIT,
) -> RenderReport:
    """Render ``pixels`` with one worker thread per row band.

    Each worker receives a view of its own band only and maps its rows
    through the full raster, so the output equals a sequential ``render``.
    The pool is shut down (all workers joined) before this returns or
    re-raises a worker error.
    """
    width, height = bounds
    if width <= 0 or height <= 0:
        raise ValueError(f"Image bounds must be positive, got {width}x{height}")
    check_buffer(pixels, bounds)

    scheduler = BandScheduler(bounds, threads)
    start_time = time.perf_counter()

    records: List[Dict[str, Any]] = []
    with ThreadPoolExecutor(
        max_workers=len(scheduler.bands),
        thread_name_prefix="band",
    ) as executor:
        futures: Dict[Future, Band] = {}
        for band in scheduler.bands:
            future = executor.submit(
                _render_band_timed,
                pixels[band.start:band.stop],
                band,
                bounds,
                upper_left,
                lower_right,
                limit,
            )
            futures[future] = band
        for future in as_completed(futures):
            comp_time, thread_name = future.result()
            band = futures[future]
            records.append(
                _band_record(
                    band,
                    scheduler.corners(band, upper_left, lower_right),
                    thread_name,
                    comp_time,
                )
            )

    wall_time = time.perf_counter() - start_time
    records.sort(key=lambda record: record["band"])

    timing = {
        "wall_time": wall_time,
        "comp_total": sum(record["comp_time"] for record in records),
        "total_bands": len(records),
        "rows_per_band": scheduler.rows_per_band,
        "threads": threads,
    }
    return RenderReport(pixels, (width, height), timing, records)
