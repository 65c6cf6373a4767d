# assembly/build_gif.py
# PURPOSE: run the whole pipeline once: config -> random walk -> frames -> GIF.
# The GIF is rendered into a temp file next to the destination and moved into
# place only after the last frame is encoded, so a failed run never leaves a
# half-written file at --out.
from __future__ import annotations
import argparse, os, sys, tempfile
from pathlib import Path
from typing import Iterable, List, NamedTuple, Sequence, Tuple

from adapters import bar_chart
from generator.gen_series import Sample, generate_from_plan
from planner.plan_animation import CONFIG_PATH, InvalidConfiguration, build_plan, load_config


class Frame(NamedTuple):
    timestamp: str
    samples: Tuple[Sample, ...]


class AnimationError(Exception):
    def __init__(self, stage: str, path: Path, cause: BaseException):
        self.stage = stage
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{stage} failed for {self.path}: {cause}")


class AnimationRenderError(AnimationError, RuntimeError):
    """The chart/encoder collaborator failed while producing frames."""


class AnimationWriteError(AnimationError, OSError):
    """The GIF could not be written to (or published at) its destination."""


def group_frames(samples: Iterable[Sample]) -> List[Frame]:
    """Group samples by timestamp, keeping the order timestamps first appear in."""
    frames: List[Frame] = []
    seen = set()
    current: List[Sample] = []
    stamp = None
    for s in samples:
        if s.timestamp != stamp:
            if current:
                frames.append(Frame(stamp, tuple(current)))
            if s.timestamp in seen:
                raise InvalidConfiguration(f"timestamp {s.timestamp!r} reappears after its frame was closed")
            seen.add(s.timestamp)
            stamp, current = s.timestamp, []
        if any(c.series_id == s.series_id for c in current):
            raise InvalidConfiguration(f"series {s.series_id} appears twice in frame {s.timestamp!r}")
        current.append(s)
    if current:
        frames.append(Frame(stamp, tuple(current)))

    if frames:
        size = len(frames[0].samples)
        for f in frames:
            if len(f.samples) != size:
                raise InvalidConfiguration(
                    f"frame {f.timestamp!r} has {len(f.samples)} samples, expected {size}")
    return frames


def _bars(frame: Frame) -> Tuple[str, List[Tuple[str, float]]]:
    return frame.timestamp, [(str(s.series_id), s.value) for s in frame.samples]


def build_animation(
    samples: Sequence[Sample],
    out_path: Path,
    axis_range: Tuple[float, float, float],
    frame_duration: float,
    loop: bool = True,
    **chart_opts,
) -> Path:
    """
    Render samples as a looping bar-chart GIF at out_path (overwriting it).
    Returns out_path. An empty sample sequence is rejected; no file is written.
    """
    out_path = Path(out_path)
    frames = group_frames(samples)
    if not frames:
        raise InvalidConfiguration("no samples to animate (total_duration must exceed one frame_time)")
    if not frame_duration > 0:
        raise InvalidConfiguration(f"frame_duration must be > 0, got {frame_duration!r}")

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=out_path.parent, prefix=f".{out_path.stem}.",
                                         suffix=".gif", delete=False) as f:
            tmp = Path(f.name)
    except OSError as e:
        raise AnimationWriteError("write", out_path, e) from e

    # anything the chart/encoder raises is a render failure, OSError included;
    # only publishing the finished temp file counts as the write stage
    try:
        try:
            bar_chart.render([_bars(f) for f in frames], tmp, axis_range, frame_duration,
                             loop=loop, **chart_opts)
        except Exception as e:
            raise AnimationRenderError("render", out_path, e) from e
        try:
            os.replace(tmp, out_path)
        except OSError as e:
            raise AnimationWriteError("write", out_path, e) from e
    finally:
        if tmp.exists():
            tmp.unlink()
    return out_path


def main(argv=None):
    ap = argparse.ArgumentParser(description="Render a random-walk bar chart as an animated GIF")
    ap.add_argument("--config", type=Path, default=CONFIG_PATH, help="YAML config (default: config/animation.yml)")
    ap.add_argument("--out", dest="output_path", help="output GIF path")
    ap.add_argument("--seed", type=int)
    ap.add_argument("--series-count", type=int)
    ap.add_argument("--duration", dest="total_duration", type=float, help="seconds")
    ap.add_argument("--fps", dest="frames_per_second", type=float)
    ap.add_argument("--std", dest="step_std_dev", type=float, help="random-walk step std dev")
    ap.add_argument("--no-loop", dest="loop", action="store_const", const=False)
    args = ap.parse_args(argv)

    try:
        raw = load_config(args.config)
        overrides = {k: v for k, v in vars(args).items() if k != "config"}
        plan = build_plan(raw, **overrides)
    except (FileNotFoundError, InvalidConfiguration) as e:
        print("[build_gif] ERROR (config):", e)
        sys.exit(1)

    print(f"[build_gif] {plan.series_count} series, {plan.total_duration}s @ {plan.frames_per_second} fps, "
          f"std={plan.step_std_dev} seed={plan.seed}")
    try:
        samples = generate_from_plan(plan)
        n_frames = len({s.timestamp for s in samples})
        print(f"[build_gif] generated {len(samples)} samples in {n_frames} frames")
        out = build_animation(
            samples, plan.output_path, plan.axis_range, plan.frame_time, loop=plan.loop,
            title=plan.title, width=plan.width, height=plan.height, dpi=plan.dpi,
            bar_color=plan.bar_color,
        )
    except InvalidConfiguration as e:
        print("[build_gif] ERROR (config):", e)
        sys.exit(1)
    except AnimationError as e:
        print(f"[build_gif] ERROR ({e.stage}):", e)
        sys.exit(2)

    loop_txt = "looping" if plan.loop else "play once"
    print(f"[build_gif] wrote {out} ({n_frames} frames @ {bar_chart.gif_delay_ms(plan.frames_per_second)} ms, {loop_txt})")


if __name__ == "__main__":
    main()
