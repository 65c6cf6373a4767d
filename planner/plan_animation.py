#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
planner/plan_animation.py
PURPOSE:
  - Loads config/animation.yml (or any YAML passed with --config).
  - Merges command-line overrides on top of it.
  - Validates every key and returns an AnimationPlan that the generator
    and the assembler read from.

NOTES:
  - Nothing is rendered or written here; a bad value stops the run before
    any frame exists.
  - frame_time (seconds per frame) is derived from frames_per_second.
"""
from __future__ import annotations
import math
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

import yaml

# ---------- CONSTANT PATHS ----------
ROOT = Path(__file__).resolve().parents[1]
CONFIG_PATH = ROOT / "config" / "animation.yml"

DEFAULTS: Dict[str, Any] = {
    "series_count": 5,
    "total_duration": 5.0,
    "frames_per_second": 10.0,
    "step_std_dev": 0.05,
    "seed": None,
    "output_path": "out/bar_walk.gif",
    "loop": True,
    "axis_range": {"min": 0.0, "max": 1.0, "step": 0.2},
    "title": "Random walk",
    "width": 640,
    "height": 480,
    "dpi": 100,
    "bar_color": "#67e8f9",
}


class InvalidConfiguration(ValueError):
    """A configuration value is missing, malformed or out of range."""


class AxisRange(NamedTuple):
    min: float
    max: float
    step: float


class AnimationPlan(NamedTuple):
    series_count: int
    total_duration: float
    frames_per_second: float
    step_std_dev: float
    seed: Optional[int]
    output_path: Path
    loop: bool
    axis_range: AxisRange
    title: str
    width: int
    height: int
    dpi: int
    bar_color: str

    @property
    def frame_time(self) -> float:
        return 1.0 / self.frames_per_second


def load_config(path: Optional[Path] = None) -> dict:
    """Read a YAML config file and return its mapping."""
    path = Path(path or CONFIG_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Missing config: {path}. Create it (see config/animation.yml template).")
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path} must contain a YAML mapping, got {type(data).__name__}")
    return data


def _number(raw: dict, key: str) -> float:
    value = raw.get(key)
    # bool is an int subclass; "true" is never a valid size or rate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfiguration(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise InvalidConfiguration(f"'{key}' must be finite, got {value!r}")
    return float(value)


def _positive(raw: dict, key: str) -> float:
    value = _number(raw, key)
    if value <= 0:
        raise InvalidConfiguration(f"'{key}' must be > 0, got {value!r}")
    return value


def _positive_int(raw: dict, key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"'{key}' must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfiguration(f"'{key}' must be > 0, got {value!r}")
    return value


def parse_axis_range(value: Any) -> AxisRange:
    """
    Accept {min, max, step} or a [min, max, step] list.
    The range must be explicit: bar heights are only comparable across
    frames when every frame shares it.
    """
    if isinstance(value, AxisRange):
        parts = dict(value._asdict())
    elif isinstance(value, dict):
        parts = value
    elif isinstance(value, (list, tuple)) and len(value) == 3:
        parts = dict(zip(("min", "max", "step"), value))
    else:
        raise InvalidConfiguration(f"'axis_range' must be a mapping with min/max/step, got {value!r}")

    missing = [k for k in ("min", "max", "step") if k not in parts]
    if missing:
        raise InvalidConfiguration(f"'axis_range' is missing {', '.join(missing)}")
    lo = _number(parts, "min")
    hi = _number(parts, "max")
    step = _number(parts, "step")
    if lo >= hi:
        raise InvalidConfiguration(f"'axis_range' min ({lo}) must be below max ({hi})")
    if step <= 0 or step > hi - lo:
        raise InvalidConfiguration(f"'axis_range' step must be in (0, {hi - lo}], got {step}")
    return AxisRange(lo, hi, step)


def build_plan(raw: Optional[dict] = None, **overrides: Any) -> AnimationPlan:
    """
    Merge DEFAULTS < raw config < overrides (None means "not given") and
    validate the result.
    """
    merged = dict(DEFAULTS)
    merged.update(raw or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(merged) - set(DEFAULTS))
    if unknown:
        valid = ", ".join(sorted(DEFAULTS))
        raise InvalidConfiguration(f"Unknown config key(s): {', '.join(unknown)}. Valid keys: {valid}")

    step_std_dev = _number(merged, "step_std_dev")
    if step_std_dev < 0:
        raise InvalidConfiguration(f"'step_std_dev' must be >= 0, got {step_std_dev!r}")

    seed = merged["seed"]
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise InvalidConfiguration(f"'seed' must be an integer or null, got {seed!r}")

    output_path = merged["output_path"]
    if not output_path or not str(output_path).strip():
        raise InvalidConfiguration("'output_path' must not be empty")

    if not isinstance(merged["loop"], bool):
        raise InvalidConfiguration(f"'loop' must be true or false, got {merged['loop']!r}")

    return AnimationPlan(
        series_count=_positive_int(merged, "series_count"),
        total_duration=_positive(merged, "total_duration"),
        frames_per_second=_positive(merged, "frames_per_second"),
        step_std_dev=step_std_dev,
        seed=seed,
        output_path=Path(output_path),
        loop=merged["loop"],
        axis_range=parse_axis_range(merged["axis_range"]),
        title=str(merged["title"] or ""),
        width=_positive_int(merged, "width"),
        height=_positive_int(merged, "height"),
        dpi=_positive_int(merged, "dpi"),
        bar_color=str(merged["bar_color"]),
    )
