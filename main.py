from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from mandelband.config import (
    default_render_config,
    load_named_sweep_configs,
    parse_complex,
    parse_image_size,
)
from mandelband.computation import ITERATION_LIMIT
from mandelband.execution import run_single_render, run_sweep
from mandelband.scheduling import DEFAULT_THREADS

USAGE = "[--threads N] [--limit N] FILE PIXELS UPPERLEFT LOWERRIGHT"
USAGE_EXAMPLE = "mandel.png 1000x750 -1.20,0.35 -1,0.20"

# argparse reads corner points such as "-1.20,0.35" as unknown options
NEGATIVE_POINT = re.compile(r"^-\.?\d")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Render the Mandelbrot set as a grayscale PNG, one thread per row band.",
        usage=f"%(prog)s {USAGE}\n       %(prog)s --sweep PATH [--suite NAME] [--task-id N] [--list-suites]",
        epilog=f"Example: {sys.argv[0]} {USAGE_EXAMPLE}",
    )
    parser.add_argument(
        "positionals",
        nargs="*",
        metavar="ARG",
        help="FILE (output PNG), PIXELS (WIDTHxHEIGHT), UPPERLEFT and LOWERRIGHT (RE,IM)",
    )
    parser.add_argument("--threads", type=int, default=DEFAULT_THREADS, help="Number of worker threads")
    parser.add_argument("--limit", type=int, default=ITERATION_LIMIT, help="Escape-time iteration limit")

    parser.add_argument("--sweep", type=str, help="Path to sweep YAML file")
    parser.add_argument("--suite", type=str, help="Name of suite/experiment within sweep file")
    parser.add_argument("--list-suites", action="store_true", help="List suites in sweep file")
    parser.add_argument("--task-id", type=int, help="Run specific config index (for job arrays)")

    args, extras = parser.parse_known_args(argv)
    unknown = [arg for arg in extras if arg.startswith("-") and arg != "--" and not NEGATIVE_POINT.match(arg)]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")
    # extras keep their command-line order and always follow the consumed positionals
    args.positionals = args.positionals + [arg for arg in extras if arg != "--"]
    return args


def main(argv=None):
    args = parse_args(argv)

    # Handle sweep runs
    if args.sweep:
        sweep_path = Path(args.sweep)

        if args.list_suites:
            for name, configs in load_named_sweep_configs(sweep_path):
                print(f"{name or sweep_path.stem}: {len(configs)} configurations")
            return 0

        if args.task_id is not None and args.suite is None:
            sys.exit("ERROR: --task-id requires --suite")

        try:
            suites = load_named_sweep_configs(sweep_path, args.suite)
        except ValueError as exc:
            sys.exit(f"ERROR: {exc}")

        exit_code = 0
        for suite_name, configs in suites:
            descriptor = f"{sweep_path}::{suite_name}" if suite_name else str(sweep_path)
            rc = run_sweep(configs, args.task_id, suite_name, descriptor)
            exit_code = exit_code or rc
        return exit_code

    if args.suite:
        sys.exit("ERROR: --suite requires --sweep")

    # Handle direct CLI run - all four positionals required
    if len(args.positionals) != 4:
        sys.exit(
            f"Usage: {sys.argv[0]} {USAGE}\n"
            f"Example: {sys.argv[0]} {USAGE_EXAMPLE}"
        )
    file, pixels, upper_left, lower_right = args.positionals

    try:
        width, height = parse_image_size(pixels)
        config = default_render_config(
            width=width,
            height=height,
            upper_left=parse_complex(upper_left),
            lower_right=parse_complex(lower_right),
            threads=args.threads,
            limit=args.limit,
            output=file,
        )
    except ValueError as exc:
        sys.exit(f"ERROR: {exc}")

    run_single_render(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
