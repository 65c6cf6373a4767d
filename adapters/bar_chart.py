# -*- coding: utf-8 -*-
"""
Bar chart frames -> animated GIF using matplotlib + Pillow.
One bar per series, fixed value axis, "Frame <timestamp>" label per frame.
"""
from __future__ import annotations
from pathlib import Path
from typing import Sequence, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.animation import PillowWriter
import numpy as np

# (timestamp, [(bar label, value), ...])
FrameBars = Tuple[str, Sequence[Tuple[str, float]]]


def gif_delay_ms(fps: float) -> int:
    """Per-frame delay a GIF can hold for fps: whole hundredths of a second, at least one."""
    return 10 * max(1, int(round(100 / fps)))


class LoopingPillowWriter(PillowWriter):
    """PillowWriter with a loop switch (GIF loop=0 plays forever, no block plays once)."""

    def __init__(self, *args, loop: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.loop = loop

    def finish(self):
        frames = getattr(self, "_frames", [])
        # nothing grabbed (render aborted before the first frame)
        if not frames:
            return
        extra = {"loop": 0} if self.loop else {}
        frames[0].save(
            self.outfile, format="GIF", save_all=True, append_images=frames[1:],
            duration=gif_delay_ms(self.fps), **extra,
        )


def _axes(ax, axis_range, n_bars: int):
    lo, hi, step = axis_range
    ax.set_ylim(lo, hi)
    ax.set_yticks(np.arange(lo, hi + step / 2, step))
    ax.set_xlim(-0.6, n_bars - 0.4)
    ax.set_facecolor("#101426")
    ax.tick_params(colors="white")
    for s in ax.spines.values():
        s.set_color("white")
    ax.grid(axis="y", color="#1f2a44", linestyle="--", linewidth=0.5, alpha=0.6)


def render(
    frames: Sequence[FrameBars],
    out_path: Path,
    axis_range: Tuple[float, float, float],
    frame_duration: float,
    loop: bool = True,
    title: str = "",
    width: int = 640,
    height: int = 480,
    dpi: int = 100,
    bar_color: str = "#67e8f9",
) -> None:
    out_path = Path(out_path)
    labels = [label for label, _ in frames[0][1]]

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi, facecolor="#101426")
    try:
        ax = fig.add_subplot(111)
        _axes(ax, axis_range, len(labels))
        bars = ax.bar(labels, [0.0] * len(labels), color=bar_color)
        if title:
            ax.set_title(title[:80], color="white", fontsize=14)
        stamp = ax.text(0.98, 0.96, "", ha="right", va="top", color="white",
                        transform=ax.transAxes, fontsize=11)

        writer = LoopingPillowWriter(fps=1.0 / frame_duration, loop=loop)
        with writer.saving(fig, str(out_path), dpi):
            for timestamp, bar_values in frames:
                for b, (_, value) in zip(bars, bar_values):
                    b.set_height(value)
                stamp.set_text(f"Frame {timestamp}")
                writer.grab_frame()
    finally:
        plt.close(fig)
