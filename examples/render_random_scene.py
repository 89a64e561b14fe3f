#!/usr/bin/env python3
"""Render the random spheres scene.

Builds the random spheres scene, points the default depth-of-field camera
at it, renders it and writes the result as PPM (or any format Pillow knows,
by file extension).

Usage:
    python -m examples.render_random_scene [options]

Options:
    --width WIDTH         Image width in pixels (default: 200)
    --height HEIGHT       Image height in pixels (default: 100)
    --samples SAMPLES     Number of samples per pixel (default: 50)
    --max-depth DEPTH     Bounce budget per path (default: 50)
    --seed SEED           Seed of the sampling streams (default: 0)
    --scene-seed SEED     Seed of the scene layout (default: random)
    --output OUTPUT       Output file path, "-" for PPM on stdout
                          (default: random_scene.ppm)
    --rows-per-batch N    Scanlines per progress update (default: 10)
    --arch {auto,cpu,gpu} Taichi backend (default: auto)
    --verbose             Log renderer details to stderr
    --quiet               Suppress progress output

Example:
    python -m examples.render_random_scene --width 400 --height 200 --samples 20 \\
        --output spheres.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=200,
        help="Image width in pixels (default: 200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=100,
        help="Image height in pixels (default: 100)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=50,
        help="Number of samples per pixel (default: 50)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Bounce budget per path (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the sampling streams (default: 0)",
    )
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=None,
        help="Seed of the scene layout (default: random)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="random_scene.ppm",
        help='Output file path, "-" writes PPM to stdout (default: random_scene.ppm)',
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=10,
        help="Scanlines per progress update (default: 10)",
    )
    parser.add_argument(
        "--arch",
        choices=["auto", "cpu", "gpu"],
        default="auto",
        help="Taichi backend; auto tries the GPU first (default: auto)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log renderer details to stderr",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str, quiet: bool = False) -> None:
    """Initialize Taichi on the requested backend."""
    if arch == "cpu":
        ti.init(arch=ti.cpu)
        return
    if arch == "gpu":
        ti.init(arch=ti.gpu)
        return

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not quiet:
            print("Using GPU backend", file=sys.stderr)
    except Exception:
        ti.init(arch=ti.cpu)
        if not quiet:
            print("Using CPU backend", file=sys.stderr)


def render_random_scene(
    width: int = 200,
    height: int = 100,
    num_samples: int = 50,
    max_depth: int = 50,
    seed: int = 0,
    scene_seed: int | None = None,
    output_path: str = "random_scene.ppm",
    rows_per_batch: int = 10,
    quiet: bool = False,
) -> Path | None:
    """Render the random spheres scene and save it.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        max_depth: Bounce budget per path.
        seed: Seed of the sampling streams.
        scene_seed: Seed of the scene layout, None for a fresh layout.
        output_path: Output file path, or "-" for PPM on stdout.
        rows_per_batch: Scanlines to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file, or None when written to stdout.
    """
    # Lazy imports to allow Taichi initialization first
    from src.spheretrace.camera.thin_lens import setup_camera
    from src.spheretrace.core.renderer import RenderConfig, Renderer
    from src.spheretrace.preview.export import save_image, write_ppm
    from src.spheretrace.scene.random_scene import create_default_camera, create_random_scene

    config = RenderConfig(
        width=width,
        height=height,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
        seed=seed,
    )

    if not quiet:
        print(f"Creating random spheres scene ({width}x{height})...", file=sys.stderr)

    scene = create_random_scene(seed=scene_seed)
    setup_camera(create_default_camera(config.aspect_ratio))

    if not quiet:
        print(
            f"Rendering {scene.get_sphere_count()} spheres at {num_samples} samples per pixel...",
            file=sys.stderr,
        )

    start_time = time.time()

    def progress_callback(rows_done: int, rows_total: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / rows_total) * 100
            print(
                f"\r  Progress: {rows_done}/{rows_total} scanlines "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                file=sys.stderr,
                flush=True,
            )

    renderer = Renderer(config)
    pixels = renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print(file=sys.stderr)  # Newline after progress

    output_file = None
    if output_path == "-":
        write_ppm(pixels, sys.stdout)
        sys.stdout.flush()
    else:
        output_file = Path(output_path)
        save_image(pixels, output_file)

    total_time = time.time() - start_time
    if not quiet:
        if output_file is not None:
            print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
        print(f"Total time: {total_time:.2f}s", file=sys.stderr)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    init_taichi(args.arch, quiet=args.quiet)

    try:
        render_random_scene(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_seed=args.scene_seed,
            output_path=args.output,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
