"""Configuration objects and YAML loading for Mandelbrot band renders."""

from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import product
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

import yaml

from .computation import ITERATION_LIMIT, Complex
from .scheduling import DEFAULT_THREADS

T = TypeVar("T")


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single Mandelbrot render."""

    width: int
    height: int
    upper_left: Complex = Complex(-1.20, 0.35)
    lower_right: Complex = Complex(-1.0, 0.20)
    threads: int = DEFAULT_THREADS
    limit: int = ITERATION_LIMIT
    output: Optional[str] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if not (self.upper_left.re < self.lower_right.re and self.upper_left.im > self.lower_right.im):
            raise ValueError(
                f"Upper-left corner {self.upper_left} must lie left of and above "
                f"lower-right corner {self.lower_right}"
            )
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")
        if not 0 < self.limit <= ITERATION_LIMIT:
            raise ValueError(f"limit must be in [1, {ITERATION_LIMIT}], got {self.limit}")

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        return (
            f"t{self.threads}_l{self.limit}_{self.image_size}_"
            f"{self.upper_left}_{self.lower_right}"
        )

    @property
    def output_path(self) -> Path:
        return Path(self.output) if self.output else Path(f"{self.run_name}.png")

    def to_dict(self) -> dict:
        """Convert to a flat dictionary for MLflow logging."""
        return {
            "width": self.width,
            "height": self.height,
            "upper_left": str(self.upper_left),
            "lower_right": str(self.lower_right),
            "threads": self.threads,
            "limit": self.limit,
            "output": str(self.output_path),
        }

    def to_cli_args(self) -> List[str]:
        """Convert config to CLI arguments.

        Positionals follow ``--`` since corner points may start with ``-``.
        """
        return [
            f"--threads={self.threads}",
            f"--limit={self.limit}",
            "--",
            str(self.output_path),
            self.image_size,
            str(self.upper_left),
            str(self.lower_right),
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(width=1000, height=750)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def parse_pair(text: str, separator: str, convert: Callable[[str], T] = int) -> Tuple[T, T]:
    """Parse ``"<left><separator><right>"``, e.g. ``"400x600"`` or ``"1.0,0.5"``."""
    left, found, right = text.partition(separator)
    if not found:
        raise ValueError(f"Expected two values separated by {separator!r}, got {text!r}")
    return convert(left), convert(right)


def parse_complex(text: str) -> Complex:
    """Parse ``"re,im"`` into a ``Complex``."""
    re, im = parse_pair(text, ",", float)
    return Complex(re, im)


def parse_image_size(value: str) -> Tuple[int, int]:
    return parse_pair(value.lower().strip(), "x", int)


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load every suite of a sweep file as one flat list, in file order."""
    return [config for _, configs in load_named_sweep_configs(yaml_path) for config in configs]


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = {**defaults, **(exp.get("defaults", {}) or {})}
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(raw_data)
    output_dir = data.pop("output_dir", None)
    config = RenderConfig(**data)  # type: ignore[arg-type]
    if config.output is None and output_dir is not None:
        config = replace(config, output=str(Path(str(output_dir)) / f"{config.run_name}.png"))
    return config


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    configs: List[RenderConfig] = []

    regions = sweep.get("regions")
    param_grid = {k: sweep[k] for k in sweep if k not in {"regions", "image_shape"}}
    shape_options = sweep.get("image_shape")
    keys = list(param_grid.keys())

    if regions:
        for region in regions:
            upper_left, lower_right = region
            combos = product(*[param_grid[k] for k in keys]) if keys else [()]
            for combo in combos:
                data = {**defaults, **dict(zip(keys, combo))}
                data["upper_left"] = upper_left
                data["lower_right"] = lower_right
                configs.extend(_expand_shapes(data, shape_options))
    elif not keys:
        configs.extend(_expand_shapes(defaults, shape_options))
    else:
        for combo in product(*[param_grid[k] for k in keys]):
            data = {**defaults, **dict(zip(keys, combo))}
            configs.extend(_expand_shapes(data, shape_options))

    return configs


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    for key in ("image_size", "image_shape"):
        shape = result.pop(key, None)
        if shape is not None:
            width, height = _normalize_shape_entry(shape)
            result.setdefault("width", width)
            result.setdefault("height", height)
    for key in ("width", "height", "threads", "limit"):
        if key in result:
            result[key] = int(result[key])  # type: ignore[arg-type]
    for key in ("upper_left", "lower_right"):
        if key in result:
            result[key] = _normalize_point(result[key])
    if result.get("output") is not None:
        result["output"] = str(result["output"])
    return result


def _normalize_point(entry: object) -> Complex:
    if isinstance(entry, Complex):
        return entry
    if isinstance(entry, dict):
        return Complex(float(entry["re"]), float(entry["im"]))
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return Complex(float(entry[0]), float(entry[1]))
    if isinstance(entry, str):
        return parse_complex(entry)
    raise ValueError(f"Unsupported complex point specification: {entry!r}")


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_shape dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        return parse_image_size(entry)
    raise ValueError(f"Unsupported image shape specification: {entry!r}")


def _expand_shapes(base: Dict[str, object], shape_options: object) -> List[RenderConfig]:
    if not shape_options:
        return [_build_render_config(base)]

    shapes: Iterable[Tuple[int, int]]
    if isinstance(shape_options, (list, tuple)):
        shapes = [_normalize_shape_entry(opt) for opt in shape_options]
    else:
        shapes = [_normalize_shape_entry(shape_options)]

    configs = []
    for width, height in shapes:
        data = {**base, "width": width, "height": height}
        configs.append(_build_render_config(data))
    return configs
