"""Structured results returned from a parallel render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class RenderReport:
    """Container for outputs produced by ``render_parallel``."""

    image: np.ndarray
    bounds: Tuple[int, int]
    timing: Dict[str, Any]
    bands: Optional[List[Dict[str, Any]]]

    @property
    def raster(self) -> np.ndarray:
        """The flat buffer viewed as ``(height, width)`` rows."""
        width, height = self.bounds
        return self.image.reshape(height, width)

    def copy_bands(self) -> Optional[List[Dict[str, Any]]]:
        if self.bands is None:
            return None
        return [record.copy() for record in self.bands]
