# -*- coding: utf-8 -*-
"""
gen_series.py
Random-walk data for the bar animation.

Every series starts at 0.5. At each time step the current value of each
series is recorded as a Sample, then nudged by a normal draw and clamped
back into [0, 1]. Samples come out in (time step, series index) order, so
grouping them by timestamp gives complete, ordered frames.

The sweep stops one frame_time short of total_duration: a 1.0 s run at
10 fps yields 9 frames (t = 0.0 .. 0.8).
"""
from __future__ import annotations
import math
from typing import List, NamedTuple, Optional

import numpy as np

from planner.plan_animation import AnimationPlan, InvalidConfiguration

START_VALUE = 0.5


class Sample(NamedTuple):
    timestamp: str
    series_id: int
    value: float


def step_count(total_duration: float, frames_per_second: float) -> int:
    """Number of time steps t = k / fps with t < total_duration - 1 / fps."""
    # rounding strips float noise such as 0.3 * 10 == 3.0000000000000004
    span = round(total_duration * frames_per_second - 1, 9)
    return max(0, math.ceil(span))


def label_decimals(frame_time: float) -> int:
    """Smallest number of decimals (>= 1) that keeps consecutive labels distinct."""
    return max(1, math.ceil(round(-math.log10(frame_time), 9)))


def timestamp_label(t: float, decimals: int = 1) -> str:
    """Format seconds as a compact clock label: 0:00.0, 0:59.9, 1:00.0 ..."""
    scale = 10 ** decimals
    units = int(round(t * scale))
    minutes, rem = divmod(units, 60 * scale)
    seconds = rem / scale
    return f"{minutes}:{seconds:0{3 + decimals}.{decimals}f}"


def _validate(series_count: int, total_duration: float, frames_per_second: float, step_std_dev: float) -> None:
    if isinstance(series_count, bool) or not isinstance(series_count, int) or series_count <= 0:
        raise InvalidConfiguration(f"series_count must be a positive integer, got {series_count!r}")
    if not (total_duration > 0 and math.isfinite(total_duration)):
        raise InvalidConfiguration(f"total_duration must be > 0 and finite, got {total_duration!r}")
    if not (frames_per_second > 0 and math.isfinite(frames_per_second)):
        raise InvalidConfiguration(f"frames_per_second must be > 0 and finite, got {frames_per_second!r}")
    if not (step_std_dev >= 0 and math.isfinite(step_std_dev)):
        raise InvalidConfiguration(f"step_std_dev must be >= 0 and finite, got {step_std_dev!r}")


def generate_samples(
    series_count: int,
    total_duration: float,
    frames_per_second: float,
    step_std_dev: float = 0.05,
    rng: Optional[np.random.Generator] = None,
) -> List[Sample]:
    _validate(series_count, total_duration, frames_per_second, step_std_dev)
    rng = rng if rng is not None else np.random.default_rng()
    frame_time = 1.0 / frames_per_second
    decimals = label_decimals(frame_time)

    values = [START_VALUE] * series_count
    samples: List[Sample] = []
    for k in range(step_count(total_duration, frames_per_second)):
        stamp = timestamp_label(k * frame_time, decimals)
        for i in range(series_count):
            samples.append(Sample(stamp, i + 1, values[i]))
            nudged = values[i] + float(rng.normal(0.0, step_std_dev))
            values[i] = max(0.0, min(1.0, nudged))
    return samples


def generate_from_plan(plan: AnimationPlan) -> List[Sample]:
    return generate_samples(
        plan.series_count,
        plan.total_duration,
        plan.frames_per_second,
        plan.step_std_dev,
        rng=np.random.default_rng(plan.seed),
    )
