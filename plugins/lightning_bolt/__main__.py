"""
Lightning Bolt Generator - Entry Point

Usage:
    python -m lightning_bolt [preset] [--height H] [--seed N] [--window WxH]
    python -m lightning_bolt [preset] --stats
    python -m lightning_bolt [preset] --snap [--size WxH]
    python -m lightning_bolt [preset] --frames N [--fps F] [--size WxH]

Examples:
    python -m lightning_bolt
    python -m lightning_bolt forked --seed 7
    python -m lightning_bolt storm --stats --seed 1
    python -m lightning_bolt sheet --snap --size 600x900
    python -m lightning_bolt storm --frames 30 --fps 60

Modes:
    (default)   Interactive pygame viewer
    --stats     Grow one bolt and print its structure
    --snap      Headless: render the full bolt to screenshots/bolt_<preset>.png
    --frames N  Headless: render the first N playback frames to screenshots/<preset>/

Use --list to see all available presets.
"""

import os
import sys

from .bolt import LightningBolt
from .config import LightningConfig
from .presets import DEFAULT_PRESET, PRESET_ORDER, get_preset, list_presets
from .rng import BoltRandom


def _screenshots_dir():
    return os.path.join(os.getcwd(), "screenshots")


def _build(preset, height, seed, sink=None):
    config = LightningConfig.from_dict(preset)
    bolt = LightningBolt()
    bolt.build(config, height, rng=BoltRandom(seed), sink=sink)
    return bolt


def stats(preset_key, height, seed):
    """Grow one bolt and print its counts."""
    preset = get_preset(preset_key)
    bolt = _build(preset, height, seed)
    print(f"[Lightning] {preset['name']} @ height {height} (seed={seed})")
    for key, value in bolt.stats.items():
        if isinstance(value, float):
            print(f"  {key:14s} {value:.3f}")
        else:
            print(f"  {key:14s} {value}")


def snap(preset_key, height, seed, size):
    """Headless mode: render the whole bolt lit at once and save a PNG."""
    from .render import render_bolt, save_png

    preset = get_preset(preset_key)
    bolt = _build(preset, height, seed)
    rgb = render_bolt(bolt, width=size[0], height=size[1])
    path = save_png(rgb, os.path.join(_screenshots_dir(), f"bolt_{preset_key}.png"))
    save_png(rgb, os.path.join(_screenshots_dir(), "latest.png"))
    print(f"[Lightning] {bolt.stats['elements']} elements, saved: {path}")


def frames(preset_key, height, seed, size, count, fps):
    """Headless mode: drive playback with a fixed clock and save each frame."""
    from .render import FrameRenderer, RasterSink, save_png

    preset = get_preset(preset_key)
    sink = RasterSink(FrameRenderer(size[0], size[1]))
    bolt = _build(preset, height, seed, sink=sink)
    out_dir = os.path.join(_screenshots_dir(), preset_key)

    dt = 1.0 / fps
    print(f"[Lightning] rendering up to {count} frames at {fps} fps "
          f"(bolt plays for {bolt.driver.duration:.3f}s)")
    for i in range(count):
        done = bolt.advance(dt)
        save_png(sink.render(), os.path.join(out_dir, f"frame_{i:04d}.png"))
        if done:
            print(f"[Lightning] bolt finished after {i + 1} frames")
            break
    print(f"[Lightning] frames saved to {out_dir}")


def _parse_size(text):
    parts = text.lower().split("x")
    return int(parts[0]), int(parts[1])


def main(argv=None):
    preset_key = DEFAULT_PRESET
    height = None
    seed = None
    win_w, win_h = 900, 900
    size = (512, 768)
    mode = "viewer"
    frame_count = 0
    fps = 30.0

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--height" and i + 1 < len(args):
            height = float(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            win_w, win_h = _parse_size(args[i + 1])
            i += 2
        elif arg == "--size" and i + 1 < len(args):
            size = _parse_size(args[i + 1])
            i += 2
        elif arg == "--fps" and i + 1 < len(args):
            fps = float(args[i + 1])
            i += 2
        elif arg == "--frames" and i + 1 < len(args):
            mode = "frames"
            frame_count = int(args[i + 1])
            i += 2
        elif arg == "--snap":
            mode = "snap"
            i += 1
        elif arg == "--stats":
            mode = "stats"
            i += 1
        elif arg == "--list":
            print("\nAvailable presets:")
            for key, name, desc in list_presets():
                print(f"    {key:10s} {name:16s} {desc}")
            print()
            return 0
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        elif arg in PRESET_ORDER:
            preset_key = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return 2

    if height is None:
        height = get_preset(preset_key)["height"]

    if mode == "stats":
        stats(preset_key, height, seed)
        return 0
    if mode == "snap":
        print(f"Headless snap mode: {preset_key} @ {size[0]}x{size[1]}")
        snap(preset_key, height, seed, size)
        return 0
    if mode == "frames":
        frames(preset_key, height, seed, size, frame_count, fps)
        return 0

    from .viewer import Viewer

    print("Starting Lightning Viewer")
    print(f"  Preset: {preset_key}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(width=win_w, height=win_h, start_preset=preset_key, seed=seed,
                    strike_height=height)
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
