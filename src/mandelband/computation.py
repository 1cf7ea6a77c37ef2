"""Escape-time kernels and the sequential row renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from numba import njit

__all__ = [
    "Complex",
    "Escaped",
    "NeverEscaped",
    "NEVER_ESCAPED",
    "ITERATION_LIMIT",
    "allocate_pixels",
    "check_buffer",
    "escape_time",
    "intensity",
    "pixel_to_point",
    "render",
    "render_rows",
]

ITERATION_LIMIT = 255
ESCAPE_RADIUS_SQR = 4.0


@dataclass(frozen=True)
class Complex:
    """A point of the complex plane as a pair of 64-bit floats."""

    re: float
    im: float

    def __add__(self, other: "Complex") -> "Complex":
        return Complex(self.re + other.re, self.im + other.im)

    def __mul__(self, other: "Complex") -> "Complex":
        return Complex(
            self.re * other.re - self.im * other.im,
            self.re * other.im + self.im * other.re,
        )

    def norm_sqr(self) -> float:
        return self.re * self.re + self.im * self.im

    def __str__(self) -> str:
        return f"{self.re},{self.im}"


@dataclass(frozen=True)
class Escaped:
    """The orbit left the radius-2 disc at iteration ``count``."""

    count: int


@dataclass(frozen=True)
class NeverEscaped:
    """The orbit stayed bounded for the whole iteration limit."""


NEVER_ESCAPED = NeverEscaped()

EscapeTime = Union[Escaped, NeverEscaped]


@njit(nogil=True)
def _escape_time(c_re: float, c_im: float, limit: int) -> int:
    z_re = 0.0
    z_im = 0.0
    for i in range(limit):
        if z_re * z_re + z_im * z_im > ESCAPE_RADIUS_SQR:
            return i
        z_re, z_im = (
            z_re * z_re - z_im * z_im + c_re,
            z_re * z_im + z_im * z_re + c_im,
        )
    return -1


@njit(nogil=True)
def _render_rows(
    pixels: np.ndarray,
    width: int,
    height: int,
    top: int,
    rows: int,
    ul_re: float,
    ul_im: float,
    lr_re: float,
    lr_im: float,
    limit: int,
) -> None:
    # rows are mapped through the whole raster, so a band matches the same rows of a full render
    plane_width = lr_re - ul_re
    plane_height = ul_im - lr_im
    for local_row in range(rows):
        point_im = ul_im - (top + local_row) * plane_height / height
        for column in range(width):
            point_re = ul_re + column * plane_width / width
            count = _escape_time(point_re, point_im, limit)
            if count < 0:
                pixels[local_row * width + column] = 0
            else:
                pixels[local_row * width + column] = 255 - count


def escape_time(c: Complex, limit: int) -> EscapeTime:
    """Iterate ``z <- z*z + c`` from zero and report when ``|z|`` exceeds 2.

    The magnitude is tested before each update, so the returned count is
    always in ``[0, limit)``. Points that stay bounded for ``limit``
    iterations are presumed members of the set.
    """
    count = _escape_time(float(c.re), float(c.im), int(limit))
    if count < 0:
        return NEVER_ESCAPED
    return Escaped(int(count))


def intensity(result: EscapeTime) -> int:
    """Grayscale value of an escape result: black inside, brighter for fast escapes."""
    if isinstance(result, Escaped):
        return 255 - result.count
    return 0


def pixel_to_point(
    bounds: Tuple[int, int],
    pixel: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
) -> Complex:
    """Map a ``(column, row)`` pixel onto the plane rectangle.

    ``pixel`` may sit on or past the far edge of ``bounds``; band corners are
    computed that way.
    """
    width, height = (
        lower_right.re - upper_left.re,
        upper_left.im - lower_right.im,
    )
    # rows grow downwards, the imaginary axis grows upwards
    return Complex(
        upper_left.re + pixel[0] * width / bounds[0],
        upper_left.im - pixel[1] * height / bounds[1],
    )


def allocate_pixels(bounds: Tuple[int, int]) -> np.ndarray:
    width, height = bounds
    return np.zeros(width * height, dtype=np.uint8)


def check_buffer(pixels: np.ndarray, bounds: Tuple[int, int]) -> None:
    width, height = bounds
    if len(pixels) != width * height:
        raise ValueError(
            f"Pixel buffer holds {len(pixels)} bytes, expected {width}x{height}={width * height}"
        )


def _check_limit(limit: int) -> None:
    if not 0 < limit <= ITERATION_LIMIT:
        raise ValueError(f"Iteration limit must be in [1, {ITERATION_LIMIT}], got {limit}")


def render(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
    limit: int = ITERATION_LIMIT,
) -> None:
    """Fill a row-major ``uint8`` buffer with escape-time intensities."""
    check_buffer(pixels, bounds)
    render_rows(pixels, bounds, 0, bounds[1], upper_left, lower_right, limit)


def render_rows(
    pixels: np.ndarray,
    bounds: Tuple[int, int],
    top: int,
    rows: int,
    upper_left: Complex,
    lower_right: Complex,
    limit: int = ITERATION_LIMIT,
) -> None:
    """Fill ``pixels`` with raster rows ``[top, top + rows)`` of ``bounds``.

    ``pixels`` holds only those rows. Points are mapped through the full
    raster, so the bytes equal the same rows of a full ``render``.
    """
    width, height = bounds
    if top < 0 or rows < 0 or top + rows > height:
        raise ValueError(f"Rows {top}:{top + rows} fall outside a raster of height {height}")
    check_buffer(pixels, (width, rows))
    _check_limit(limit)
    _render_rows(
        pixels,
        int(width),
        int(height),
        int(top),
        int(rows),
        float(upper_left.re),
        float(upper_left.im),
        float(lower_right.re),
        float(lower_right.im),
        int(limit),
    )
