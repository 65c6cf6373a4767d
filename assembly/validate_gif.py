# assembly/validate_gif.py
import argparse, sys
from pathlib import Path
from typing import List, Optional

from PIL import Image

from adapters.bar_chart import gif_delay_ms
from generator.gen_series import step_count
from planner.plan_animation import CONFIG_PATH, AnimationPlan, InvalidConfiguration, build_plan, load_config


def gif_info(path: Path) -> dict:
    """Return frame count, first-frame duration (ms), loop count and size of a GIF."""
    with Image.open(path) as im:
        if im.format != "GIF":
            raise SystemExit(f"{path} is not a GIF (got {im.format})")
        return {
            "frames": getattr(im, "n_frames", 1),
            "duration_ms": int(im.info.get("duration", 0)),
            # None when the file has no NETSCAPE block, i.e. plays once
            "loop": im.info.get("loop"),
            "width": im.width,
            "height": im.height,
        }


def check_gif(path: Path, plan: AnimationPlan) -> List[str]:
    info = gif_info(path)
    problems = []
    want_frames = step_count(plan.total_duration, plan.frames_per_second)
    if info["frames"] != want_frames:
        problems.append(f"expected {want_frames} frames, got {info['frames']}")
    want_ms = gif_delay_ms(plan.frames_per_second)
    if info["duration_ms"] != want_ms:
        problems.append(f"expected {want_ms} ms per frame, got {info['duration_ms']} ms")
    if plan.loop and info["loop"] != 0:
        problems.append(f"expected endless loop (loop=0), got loop={info['loop']}")
    if not plan.loop and info["loop"] is not None:
        problems.append(f"expected a single play, got loop={info['loop']}")
    if (info["width"], info["height"]) != (plan.width, plan.height):
        problems.append(f"expected {plan.width}x{plan.height}, got {info['width']}x{info['height']}")
    return problems


def main(argv: Optional[list] = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", type=Path, default=CONFIG_PATH)
    ap.add_argument("--gif", type=Path, help="GIF to check (default: output_path from the config)")
    args = ap.parse_args(argv)

    try:
        plan = build_plan(load_config(args.config))
    except (FileNotFoundError, InvalidConfiguration) as e:
        print("[validate_gif] ERROR (config):", e)
        sys.exit(1)
    gif = args.gif or plan.output_path
    if not gif.exists():
        raise SystemExit(f"No GIF at {gif}")

    problems = check_gif(gif, plan)
    if problems:
        print(f"[validate_gif] {gif} failed:")
        for p in problems:
            print(" -", p)
        sys.exit(1)

    info = gif_info(gif)
    print(f"[validate_gif] OK: {gif} {info['width']}x{info['height']} "
          f"{info['frames']} frames @ {info['duration_ms']} ms loop={info['loop']}")


if __name__ == "__main__":
    main()
