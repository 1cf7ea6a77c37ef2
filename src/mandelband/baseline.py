"""Baseline Mandelbrot implementation."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .computation import (
    ESCAPE_RADIUS_SQR,
    ITERATION_LIMIT,
    NEVER_ESCAPED,
    Complex,
    Escaped,
    EscapeTime,
    intensity,
    pixel_to_point,
)


def escape_time_reference(c: Complex, limit: int) -> EscapeTime:
    """Escape time evaluated with ``Complex`` arithmetic only."""
    z = Complex(0.0, 0.0)
    for i in range(limit):
        if z.norm_sqr() > ESCAPE_RADIUS_SQR:
            return Escaped(i)
        z = z * z + c
    return NEVER_ESCAPED


def compute_mandelbrot(
    bounds: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
    limit: int = ITERATION_LIMIT,
) -> np.ndarray:
    """Compute the grayscale raster pixel by pixel, without numba."""
    width, height = bounds
    pixels = np.zeros(width * height, dtype=np.uint8)

    for row in range(height):
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            pixels[row * width + column] = intensity(escape_time_reference(point, limit))

    return pixels
