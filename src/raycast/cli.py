"""Command-line renderer.

Usage:
    raycast [options]
    python -m raycast [options]

Options:
    -f, --file FILE       Scene file, YAML or JSON (default: scene.yml)
    -t, --threads N       CPU worker threads (default: 1)
    -w, --width WIDTH     Image width in pixels (default: 1280)
    -h, --height HEIGHT   Image height in pixels (default: 720)
    -s, --samples N       Samples per pixel (default: 8)
    --seed SEED           Jitter seed (default: 0)
    -o, --output FILE     Save the frame as PNG
    --arch ARCH           Taichi backend: cpu, gpu, cuda, vulkan, metal (default: cpu)
    --no-window           Do not open the preview window
    --quiet               Suppress progress output
    --help                Show this help and exit

Example:
    raycast -f examples/scene.yml -w 640 -h 360 -s 4 -o out.png --no-window
"""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence

from raycast.config import ARCHS, RenderConfig, init_taichi

DEFAULTS = RenderConfig()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. -h is the image height, so help is --help only."""
    parser = argparse.ArgumentParser(
        prog="raycast",
        description="Render a scene file with the ray caster.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="scene_file",
        default=DEFAULTS.scene_file,
        help=f"Scene file, YAML or JSON (default: {DEFAULTS.scene_file})",
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=DEFAULTS.threads,
        help=f"CPU worker threads (default: {DEFAULTS.threads})",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=DEFAULTS.width,
        help=f"Image width in pixels (default: {DEFAULTS.width})",
    )
    parser.add_argument(
        "-h",
        "--height",
        type=int,
        default=DEFAULTS.height,
        help=f"Image height in pixels (default: {DEFAULTS.height})",
    )
    parser.add_argument(
        "-s",
        "--samples",
        type=int,
        default=DEFAULTS.samples,
        help=f"Samples per pixel (default: {DEFAULTS.samples})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULTS.seed,
        help=f"Jitter seed (default: {DEFAULTS.seed})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Save the rendered frame as PNG",
    )
    parser.add_argument(
        "--arch",
        choices=sorted(ARCHS),
        default=DEFAULTS.arch,
        help=f"Taichi backend (default: {DEFAULTS.arch})",
    )
    parser.add_argument(
        "--no-window",
        dest="window",
        action="store_false",
        help="Do not open the preview window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--help",
        action="help",
        help="Show this help and exit",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> RenderConfig:
    """Parse command-line arguments into a RenderConfig."""
    args = build_parser().parse_args(argv)
    return RenderConfig(
        scene_file=args.scene_file,
        threads=args.threads,
        width=args.width,
        height=args.height,
        samples=args.samples,
        seed=args.seed,
        output=args.output,
        arch=args.arch,
        window=args.window,
        quiet=args.quiet,
    )


def run(config: RenderConfig) -> None:
    """Render one frame per config, then save and/or display it.

    Raises:
        ValueError: On invalid options or an invalid scene file.
        OSError: If the scene file cannot be read or the PNG written.
    """
    from raycast.scene.loader import load_scene_file

    resolution = config.resolution
    if config.samples < 1:
        raise ValueError(f"samples must be at least 1, got {config.samples}")

    scene = load_scene_file(config.scene_file)

    backend = init_taichi(config.arch, threads=config.threads, seed=config.seed)
    if not config.quiet:
        print(f"Using {backend} backend ({config.threads} thread(s))")

    # Imported after ti.init(): these modules declare Taichi fields
    from raycast.core.framebuffer import FrameRenderer

    renderer = FrameRenderer(scene, resolution, config.samples, seed=config.seed)

    if not config.quiet:
        print(
            f"Rendering {config.scene_file} at {resolution.width}x{resolution.height}, "
            f"{config.samples} samples per pixel..."
        )

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not config.quiet:
            elapsed = time.time() - start_time
            print(
                f"\r  Progress: {done}/{total} rows ({done / total * 100:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render_frame(callback=progress_callback)

    if not config.quiet:
        print()
        print(f"Render time: {time.time() - start_time:.2f}s")

    if config.output:
        renderer.save_image(config.output)
        if not config.quiet:
            print(f"Saved to: {config.output}")

    if config.window:
        from raycast.preview.interactive import InteractivePreview

        if InteractivePreview.is_display_available():
            preview = InteractivePreview(renderer.frame_buffer, title=f"raycast - {config.scene_file}")
            preview.run()
        elif not config.quiet:
            print("No display available; skipping preview window")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    config = parse_args(argv)
    try:
        run(config)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
