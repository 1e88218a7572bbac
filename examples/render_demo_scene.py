#!/usr/bin/env python3
"""Render the built-in demo scene to a PNG.

Usage:
    python examples/render_demo_scene.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 360)
    --samples SAMPLES   Samples per pixel (default: 8)
    --seed SEED         Jitter seed (default: 0)
    --threads N         CPU worker threads (default: 4)
    --output OUTPUT     Output file path (default: demo_scene.png)
    --scene-out FILE    Also write the scene description (.yml or .json)
    --quiet             Suppress progress output

Example:
    python examples/render_demo_scene.py --width 320 --height 180 --samples 4
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the built-in demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=360, help="Image height in pixels (default: 360)")
    parser.add_argument("--samples", type=int, default=8, help="Samples per pixel (default: 8)")
    parser.add_argument("--seed", type=int, default=0, help="Jitter seed (default: 0)")
    parser.add_argument("--threads", type=int, default=4, help="CPU worker threads (default: 4)")
    parser.add_argument(
        "--output",
        type=str,
        default="demo_scene.png",
        help="Output file path (default: demo_scene.png)",
    )
    parser.add_argument("--scene-out", type=str, default=None, help="Also write the scene description")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_demo_scene(
    width: int = 640,
    height: int = 360,
    num_samples: int = 8,
    seed: int = 0,
    output_path: str = "demo_scene.png",
    scene_out: str | None = None,
    quiet: bool = False,
) -> Path:
    """Render the demo scene and save it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports: Taichi must be initialised first
    from raycast.config import Resolution
    from raycast.core.framebuffer import FrameRenderer
    from raycast.scene.loader import save_scene_file
    from raycast.scene.presets import create_demo_scene

    scene = create_demo_scene()
    if scene_out:
        save_scene_file(scene, scene_out)
        if not quiet:
            print(f"Scene written to: {scene_out}")

    renderer = FrameRenderer(scene, Resolution(width, height), num_samples, seed=seed)

    if not quiet:
        print(f"Rendering demo scene ({width}x{height}, {num_samples} spp)...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            print(f"\r  Progress: {done}/{total} rows ({done / total * 100:.1f}%)", end="", flush=True)

    renderer.render_frame(callback=progress_callback)

    if not quiet:
        print()

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from raycast.config import init_taichi

    try:
        backend = init_taichi("cpu", threads=args.threads, seed=args.seed)
        if not args.quiet:
            print(f"Using {backend} backend")
        render_demo_scene(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            seed=args.seed,
            output_path=args.output,
            scene_out=args.scene_out,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
