"""Static row-band partitioning of the pixel buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .computation import Complex, pixel_to_point

__all__ = [
    "DEFAULT_THREADS",
    "Band",
    "BandScheduler",
    "band_corners",
    "partition_bands",
    "rows_per_band",
]

DEFAULT_THREADS = 8


@dataclass(frozen=True)
class Band:
    """A run of whole rows ``[top, top + height)`` of a ``width``-wide raster."""

    index: int
    top: int
    height: int
    width: int

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def start(self) -> int:
        """Offset of the band's first byte in the flat buffer."""
        return self.top * self.width

    @property
    def stop(self) -> int:
        return (self.top + self.height) * self.width

    @property
    def rows(self) -> range:
        return range(self.top, self.top + self.height)


def rows_per_band(height: int, threads: int) -> int:
    """Rows given to each band: ``height // threads + 1``.

    Truncating division plus one over-allocates, so fewer than ``threads``
    bands may be produced and the last one may be short.
    """
    if threads < 1:
        raise ValueError(f"threads must be at least 1, got {threads}")
    return height // threads + 1


def partition_bands(bounds: Tuple[int, int], threads: int = DEFAULT_THREADS) -> List[Band]:
    """Split the raster into consecutive, non-overlapping row bands."""
    width, height = bounds
    per_band = rows_per_band(height, threads)
    return [
        Band(index=index, top=top, height=min(per_band, height - top), width=width)
        for index, top in enumerate(range(0, height, per_band))
    ]


def band_corners(
    band: Band,
    bounds: Tuple[int, int],
    upper_left: Complex,
    lower_right: Complex,
) -> Tuple[Complex, Complex]:
    """Plane rectangle of a band, mapped through the global raster bounds."""
    band_upper_left = pixel_to_point(bounds, (0, band.top), upper_left, lower_right)
    band_lower_right = pixel_to_point(
        bounds,
        (bounds[0], band.top + band.height),
        upper_left,
        lower_right,
    )
    return band_upper_left, band_lower_right


@dataclass
class BandScheduler:
    """Static work scheduling - pre-assigns one band per worker."""

    bounds: Tuple[int, int]
    threads: int = DEFAULT_THREADS
    bands: List[Band] = field(init=False)

    def __post_init__(self) -> None:
        self.bands = partition_bands(self.bounds, self.threads)

    @property
    def rows_per_band(self) -> int:
        return rows_per_band(self.bounds[1], self.threads)

    def corners(
        self,
        band: Band,
        upper_left: Complex,
        lower_right: Complex,
    ) -> Tuple[Complex, Complex]:
        return band_corners(band, self.bounds, upper_left, lower_right)
