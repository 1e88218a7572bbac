#!/usr/bin/env python3
"""Show a scene in the interactive preview window.

The scene is rendered one band of rows per window frame and the finished
frame replaces the white start-up frame. Press 's' to save the
displayed frame, Escape to quit.

Usage:
    python examples/interactive_scene.py [--file scene.yml] [--width W] [--height H]
"""

from __future__ import annotations

import argparse
import sys


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive scene preview.")
    parser.add_argument("--file", type=str, default=None, help="Scene file (default: built-in demo)")
    parser.add_argument("--width", type=int, default=640, help="Window width (default: 640)")
    parser.add_argument("--height", type=int, default=360, help="Window height (default: 360)")
    parser.add_argument("--samples", type=int, default=2, help="Samples per pixel (default: 2)")
    parser.add_argument("--arch", type=str, default="cpu", help="Taichi backend (default: cpu)")
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    from raycast.config import Resolution, init_taichi
    from raycast.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Use render_demo_scene.py for headless rendering.")
        return 1

    try:
        init_taichi(args.arch)

        from raycast.core.framebuffer import FrameRenderer
        from raycast.scene.loader import load_scene_file
        from raycast.scene.presets import create_demo_scene

        scene = load_scene_file(args.file) if args.file else create_demo_scene()
        renderer = FrameRenderer(
            scene, Resolution(args.width, args.height), args.samples, band_rows=8
        )

        print(f"Opening {args.width}x{args.height} preview (s: save, Esc: quit)")
        preview = InteractivePreview(renderer.frame_buffer)
        preview.run(renderer=renderer)
        print(f"Closed after {renderer.frame_count} frame(s)")
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
