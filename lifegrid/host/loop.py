"""
Render loop for the Life simulator host.

Drives a Universe the way an animation-frame scheduler would: each frame
renders the current generation, hands the text to a callback for display,
then ticks. Frames run strictly in sequence on the calling thread; optional
throttling sleeps between frames to hold a target frame rate.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from lifegrid.core.universe import DEFAULT_ALIVE_GLYPH, DEFAULT_DEAD_GLYPH, Universe


# ---------------------------------------------------------------------------
# Frame statistics — lightweight counters for one frame
# ---------------------------------------------------------------------------

@dataclass
class FrameStats:
    """Statistics collected during a single frame."""
    frame: int = 0
    generation: int = 0        # generation that was rendered
    alive_count: int = 0       # alive cells in the rendered generation
    births: int = 0            # cells that became alive in the following tick
    deaths: int = 0            # cells that died in the following tick
    static: bool = False       # the tick left every cell unchanged


# ---------------------------------------------------------------------------
# Loop result
# ---------------------------------------------------------------------------

@dataclass
class LoopResult:
    """Result of a complete render loop run."""
    frames: int = 0
    final_generation: int = 0
    final_alive_count: int = 0
    extinct: bool = False
    static: bool = False
    stopped: bool = False      # stop() was requested by a callback
    frame_stats_history: list[FrameStats] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Render loop
# ---------------------------------------------------------------------------

class RenderLoop:
    """
    Host-side frame driver: render, display, tick.

    Attributes:
        universe: The universe being driven (owned by the caller).
        fps: Target frames per second. 0 = no throttling.
        dead_glyph, alive_glyph: Glyphs passed to Universe.render().
        stop_when_static: End the run once a tick changes nothing.
        on_frame: Optional callback on_frame(text, stats, loop), invoked
            after each frame's tick.
    """

    def __init__(
        self,
        universe: Universe,
        fps: float = 0.0,
        on_frame: Optional[Callable[[str, FrameStats, "RenderLoop"], None]] = None,
        dead_glyph: str = DEFAULT_DEAD_GLYPH,
        alive_glyph: str = DEFAULT_ALIVE_GLYPH,
        stop_when_static: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if fps < 0:
            raise ValueError(f"fps must be >= 0, got {fps}")
        self.universe = universe
        self.fps = fps
        self.on_frame = on_frame
        self.dead_glyph = dead_glyph
        self.alive_glyph = alive_glyph
        self.stop_when_static = stop_when_static
        self._sleep = sleep

        self.frame_count: int = 0
        self._stop_requested = False

    def stop(self) -> None:
        """Ask the loop to end after the current frame."""
        self._stop_requested = True

    # ------------------------------------------------------------------
    # Single frame
    # ------------------------------------------------------------------

    def step(self) -> FrameStats:
        """
        Run one frame: render, tick, then fire on_frame.

        Returns:
            FrameStats for this frame.
        """
        universe = self.universe
        text = universe.render(self.dead_glyph, self.alive_glyph)

        before = universe.cells
        stats = FrameStats(
            frame=self.frame_count,
            generation=universe.generation,
            alive_count=universe.alive_count,
        )

        universe.tick()

        after = universe.cells
        stats.births = int(np.count_nonzero(after & ~before))
        stats.deaths = int(np.count_nonzero(before & ~after))
        stats.static = stats.births == 0 and stats.deaths == 0

        self.frame_count += 1
        if self.on_frame is not None:
            self.on_frame(text, stats, self)
        return stats

    # ------------------------------------------------------------------
    # Multi-frame run
    # ------------------------------------------------------------------

    def run(self, max_frames: Optional[int] = None) -> LoopResult:
        """
        Run frames until a stop condition is met.

        Stops when ANY of these is true:
          - max_frames frames have run (None or 0 = no limit)
          - a callback called stop()
          - stop_when_static is set and a tick changed nothing

        Args:
            max_frames: Maximum number of frames for this call.

        Returns:
            LoopResult with summary statistics.
        """
        result = LoopResult()
        self._stop_requested = False
        interval = 1.0 / self.fps if self.fps > 0 else 0.0

        frames_run = 0
        started = 0.0
        while not (max_frames and frames_run >= max_frames):
            # Throttle between frames, never before the first one
            if frames_run > 0 and interval > 0:
                remaining = interval - (time.perf_counter() - started)
                if remaining > 0:
                    self._sleep(remaining)

            started = time.perf_counter()
            stats = self.step()
            frames_run += 1
            result.frame_stats_history.append(stats)
            result.static = stats.static

            if self._stop_requested:
                result.stopped = True
                break
            if self.stop_when_static and stats.static:
                break

        result.frames = frames_run
        result.final_generation = self.universe.generation
        result.final_alive_count = self.universe.alive_count
        result.extinct = self.universe.is_extinct
        return result

    def __repr__(self) -> str:
        return f"RenderLoop(frame={self.frame_count}, fps={self.fps}, universe={self.universe!r})"
