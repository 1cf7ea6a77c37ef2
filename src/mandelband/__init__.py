"""Mandelbrot band renderer - escape-time kernels split across worker threads."""

__version__ = "1.0.0"

# Core computation and config - lightweight, no tracking stack
from .computation import (
    NEVER_ESCAPED,
    Complex,
    Escaped,
    NeverEscaped,
    allocate_pixels,
    escape_time,
    pixel_to_point,
    render,
)
from .config import RenderConfig, default_render_config, parse_complex, parse_pair
from .parallel import render_parallel
from .report import RenderReport
from .scheduling import Band, partition_bands, rows_per_band


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of heavy modules."""
    if name == "run_single_render":
        from .execution import run_single_render

        return run_single_render
    elif name == "run_sweep":
        from .execution import run_sweep

        return run_sweep
    elif name == "write_image":
        from .image import write_image

        return write_image
    elif name == "load_sweep_configs":
        from .config import load_sweep_configs

        return load_sweep_configs
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Band",
    "Complex",
    "Escaped",
    "NEVER_ESCAPED",
    "NeverEscaped",
    "RenderConfig",
    "RenderReport",
    "allocate_pixels",
    "default_render_config",
    "escape_time",
    "load_sweep_configs",
    "parse_complex",
    "parse_pair",
    "partition_bands",
    "pixel_to_point",
    "render",
    "render_parallel",
    "rows_per_band",
    "run_single_render",
    "run_sweep",
    "write_image",
]
