"""PNG output of rendered grayscale buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image


def write_image(path: str | Path, pixels: np.ndarray, bounds: Tuple[int, int]) -> Path:
    """Encode a row-major ``uint8`` buffer as an 8-bit grayscale PNG.

    Missing parent directories are created; any other encoder or
    filesystem error is left to the caller.
    """
    width, height = bounds
    raster = np.asarray(pixels, dtype=np.uint8).reshape(height, width)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # 2-D uint8 arrays map to Pillow's "L" (8-bit grayscale) mode
    Image.fromarray(raster).save(path, format="PNG")
    return path
