"""
Unit tests for the RenderLoop (host frame driver).

Tests cover:
- Frame ordering (render before tick)
- Frame statistics (births, deaths, static detection)
- Multi-frame runs and stop conditions
- Callback hooks and stop() requests
- Throttling between frames
"""

import pytest

from lifegrid.core.universe import Universe
from lifegrid.host.loop import FrameStats, LoopResult, RenderLoop


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def blinker() -> Universe:
    return Universe.from_live_cells(5, 5, [(2, 1), (2, 2), (2, 3)])


@pytest.fixture
def block() -> Universe:
    return Universe.from_pattern(6, 6, "block")


class FakeSleep:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# ---------------------------------------------------------------------------
# Single frame
# ---------------------------------------------------------------------------

class TestStep:
    def test_renders_before_tick(self, blinker):
        expected = blinker.render(".", "#")
        frames = []
        loop = RenderLoop(
            blinker,
            on_frame=lambda text, stats, lp: frames.append(text),
            dead_glyph=".", alive_glyph="#",
        )
        loop.step()
        assert frames == [expected]
        assert blinker.generation == 1

    def test_stats(self, blinker):
        stats = RenderLoop(blinker).step()
        assert isinstance(stats, FrameStats)
        assert stats.frame == 0
        assert stats.generation == 0
        assert stats.alive_count == 3
        assert stats.births == 2
        assert stats.deaths == 2
        assert stats.static is False

    def test_static_still_life(self, block):
        stats = RenderLoop(block).step()
        assert stats.births == 0
        assert stats.deaths == 0
        assert stats.static is True

    def test_frame_counter(self, blinker):
        loop = RenderLoop(blinker)
        loop.step()
        second = loop.step()
        assert second.frame == 1
        assert second.generation == 1
        assert loop.frame_count == 2

    def test_negative_fps(self, blinker):
        with pytest.raises(ValueError):
            RenderLoop(blinker, fps=-1)

    def test_repr(self, blinker):
        assert "RenderLoop" in repr(RenderLoop(blinker))


# ---------------------------------------------------------------------------
# Multi-frame run
# ---------------------------------------------------------------------------

class TestRun:
    def test_max_frames(self, blinker):
        result = RenderLoop(blinker).run(max_frames=3)
        assert isinstance(result, LoopResult)
        assert result.frames == 3
        assert result.final_generation == 3
        assert blinker.generation == 3
        assert len(result.frame_stats_history) == 3
        assert result.stopped is False

    def test_oscillator_texts_alternate(self, blinker):
        texts = []
        loop = RenderLoop(blinker, on_frame=lambda text, stats, lp: texts.append(text))
        loop.run(max_frames=4)
        assert texts[0] == texts[2]
        assert texts[1] == texts[3]
        assert texts[0] != texts[1]

    def test_stop_from_callback(self, blinker):
        def on_frame(text, stats, loop):
            if stats.frame == 1:
                loop.stop()

        result = RenderLoop(blinker, on_frame=on_frame).run(max_frames=10)
        assert result.frames == 2
        assert result.stopped is True

    def test_unbounded_until_stop(self, blinker):
        def on_frame(text, stats, loop):
            if stats.frame == 24:
                loop.stop()

        result = RenderLoop(blinker, on_frame=on_frame).run(max_frames=0)
        assert result.frames == 25

    def test_stop_when_static(self, block):
        result = RenderLoop(block, stop_when_static=True).run(max_frames=10)
        assert result.frames == 1
        assert result.static is True
        assert result.extinct is False

    def test_static_does_not_stop_by_default(self, block):
        result = RenderLoop(block).run(max_frames=5)
        assert result.frames == 5
        assert result.static is True

    def test_extinction(self):
        u = Universe.from_live_cells(5, 5, [(0, 0)])
        result = RenderLoop(u).run(max_frames=2)
        assert result.extinct is True
        assert result.final_alive_count == 0

    def test_run_resets_stop_request(self, blinker):
        loop = RenderLoop(blinker)
        loop.stop()
        result = loop.run(max_frames=2)
        assert result.frames == 2


# ---------------------------------------------------------------------------
# Throttling
# ---------------------------------------------------------------------------

class TestThrottle:
    def test_no_sleep_when_unthrottled(self, blinker):
        sleep = FakeSleep()
        RenderLoop(blinker, fps=0, sleep=sleep).run(max_frames=3)
        assert sleep.calls == []

    def test_sleeps_between_frames(self, blinker):
        sleep = FakeSleep()
        # One frame per 1000 s: every gap needs a sleep
        RenderLoop(blinker, fps=0.001, sleep=sleep).run(max_frames=3)
        assert len(sleep.calls) == 2
        assert all(0 < s <= 1000.0 for s in sleep.calls)

    def test_no_sleep_after_stop(self, blinker):
        sleep = FakeSleep()
        loop = RenderLoop(
            blinker, fps=0.001, sleep=sleep,
            on_frame=lambda text, stats, lp: lp.stop(),
        )
        loop.run(max_frames=5)
        assert sleep.calls == []
