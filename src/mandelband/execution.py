"""Execution helpers for Mandelbrot CLI workflows."""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from .computation import allocate_pixels
from .config import RenderConfig
from .image import write_image
from .logging import log_to_mlflow
from .parallel import render_parallel
from .report import RenderReport


def run_single_render(
    config: RenderConfig,
    suite_name: Optional[str] = None,
) -> RenderReport:
    """Render one configuration, write its PNG and record the run."""
    print(
        f"[Run] Starting render '{config.run_name}' "
        f"(size={config.image_size}, threads={config.threads}, limit={config.limit})",
        flush=True,
    )

    pixels = allocate_pixels(config.bounds)
    report = render_parallel(
        pixels,
        config.bounds,
        config.upper_left,
        config.lower_right,
        threads=config.threads,
        limit=config.limit,
    )

    path = write_image(config.output_path, report.image, config.bounds)
    print(f"[Run] Wrote {path}", flush=True)

    suite = suite_name or os.environ.get("MANDELBAND_SUITE") or "default"
    if os.environ.get("SKIP_MLFLOW"):
        print("[Run] SKIP_MLFLOW set - skipping MLflow logging.", flush=True)
    else:
        print("[Run] Render finished, logging to MLflow...", flush=True)
        log_to_mlflow(config, report, suite)

    wall_time = report.timing.get("wall_time", 0.0)
    print(f"[Timing] Total: {wall_time:.4f}s ({report.timing['total_bands']} bands)")
    return report


def run_sweep(
    configs: List[RenderConfig],
    task_id: Optional[int] = None,
    suite_name: Optional[str] = None,
    descriptor: str = "sweep",
) -> int:
    """Render every configuration of a sweep, or just ``configs[task_id]``."""
    if not configs:
        print("ERROR: No configurations found in sweep", file=sys.stderr)
        return 1

    if task_id is not None:
        if task_id < 0 or task_id >= len(configs):
            print(f"ERROR: task-id {task_id} out of range [0, {len(configs) - 1}]", file=sys.stderr)
            return 1
        config = configs[task_id]
        print(f"[Task {task_id}] Running: {config.run_name}")
        run_single_render(config, suite_name)
        return 0

    print("=" * 70)
    print(f"Running {len(configs)} configurations from {descriptor}")
    print("=" * 70)

    successes = 0
    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        try:
            run_single_render(cfg, suite_name)
        except Exception as exc:
            print(f"    ✗ FAILED: {type(exc).__name__}: {exc}", file=sys.stderr)
            failures.append((idx, cfg.run_name))
            continue
        successes += 1
        print("    ✓ Completed")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {successes}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed configurations:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0
