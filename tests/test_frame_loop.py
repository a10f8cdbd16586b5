"""Tests for the frame loop state machine."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from app.frame_loop import FrameLoop, LoopState
from app.pipeline import PipelineContext
from capture import MovingRect, SimulatedSource
from configs.settings import AppConfig, UiConfig
from detect.config import BackgroundConfig, BackgroundVariant
from exceptions import FrameReadError
from ui.display import NO_KEY, HeadlessDisplay
from ui.drawing import BANNER_COLOR

QUIT = ord("q")
ESC = 27


def _loop(source, display, max_frames=None, ui=None, config=None) -> FrameLoop:
    source.open()
    return FrameLoop(
        source,
        display,
        PipelineContext.from_config(config or AppConfig()),
        ui=ui or UiConfig(),
        max_frames=max_frames,
    )


class _NoTrackbars(HeadlessDisplay):
    """Fails while attaching controls, as HighGUI does without a GUI backend."""

    def bind_parameters(self, window_name, store) -> None:
        raise RuntimeError("trackbars unavailable")


class _TuningDisplay(HeadlessDisplay):
    """Stages a parameter change during the first key poll."""

    def __init__(self) -> None:
        super().__init__(keys=[NO_KEY, QUIT])
        self.polls = 0

    def poll_key(self, wait_ms: int) -> int:
        self.polls += 1
        if self.polls == 1:
            self.store.set_edge_threshold(50)
            self.store.set_kernel_size(0)
        return super().poll_key(wait_ms)


@pytest.mark.parametrize("quit_key", [QUIT, ESC, 0x100000 | QUIT])
def test_quit_key_stops_loop_and_releases_source(quit_key: int) -> None:
    source = SimulatedSource(width=64, height=48)
    display = HeadlessDisplay(keys=[NO_KEY, NO_KEY, quit_key])
    loop = _loop(source, display)

    frames = loop.run()

    assert frames == 3
    assert loop.state is LoopState.STOPPED
    assert source.release_count == 1
    assert not source.is_open


def test_unrelated_keys_do_not_stop() -> None:
    source = SimulatedSource(width=32, height=24)
    display = HeadlessDisplay(keys=[ord("a"), ord(" "), QUIT])

    assert _loop(source, display).run() == 3


def test_each_window_receives_every_frame() -> None:
    ui = UiConfig()
    display = HeadlessDisplay(keys=[NO_KEY, QUIT])
    loop = _loop(SimulatedSource(width=120, height=90), display, ui=ui)

    loop.run()

    assert display.show_counts == {
        ui.source_window: 2,
        "FG Mask KNN": 2,
        ui.contour_window: 2,
    }
    assert display.frames["FG Mask KNN"].shape == (90, 120)
    assert display.frames[ui.contour_window].shape == (90, 120, 3)
    assert display.bound_windows == [ui.contour_window]


def test_source_view_carries_frame_number_banner() -> None:
    ui = UiConfig()
    display = HeadlessDisplay(keys=[QUIT])
    _loop(SimulatedSource(width=160, height=120), display, ui=ui).run()

    source_view = display.frames[ui.source_window]
    assert tuple(int(v) for v in source_view[5, 80]) == BANNER_COLOR


def test_banner_can_be_disabled() -> None:
    ui = UiConfig(show_frame_number=False)
    source = SimulatedSource(width=160, height=120)
    display = HeadlessDisplay(keys=[QUIT])
    _loop(source, display, ui=ui).run()

    assert np.array_equal(display.frames[ui.source_window], source.render(0))


def test_max_frames_stops_loop() -> None:
    source = SimulatedSource(width=32, height=24)
    loop = _loop(source, HeadlessDisplay(), max_frames=4)

    assert loop.run() == 4
    assert loop.state is LoopState.STOPPED
    assert source.release_count == 1


def test_end_of_stream_is_fatal_and_releases() -> None:
    source = SimulatedSource(width=32, height=24, n_frames=3)
    loop = _loop(source, HeadlessDisplay())

    with pytest.raises(FrameReadError) as excinfo:
        loop.run()

    assert excinfo.value.end_of_stream
    assert loop.state is LoopState.STOPPED
    assert loop.context.frames_processed == 3
    assert source.release_count == 1


def test_read_failure_is_fatal_and_releases() -> None:
    source = SimulatedSource(width=32, height=24, fail_at=2)
    loop = _loop(source, HeadlessDisplay())

    with pytest.raises(FrameReadError) as excinfo:
        loop.run()

    assert not excinfo.value.end_of_stream
    assert excinfo.value.source_id == "sim"
    assert loop.state is LoopState.STOPPED
    assert loop.context.frames_processed == 2
    assert source.release_count == 1


def test_loop_cannot_restart() -> None:
    loop = _loop(SimulatedSource(width=32, height=24), HeadlessDisplay(keys=[QUIT]))
    loop.run()

    with pytest.raises(RuntimeError):
        loop.run()


def test_parameter_changes_apply_at_next_frame() -> None:
    display = _TuningDisplay()
    loop = _loop(SimulatedSource(width=64, height=48), display)
    seen = []
    original_step = loop.step

    def recording_step():
        result = original_step()
        seen.append(result.parameters)
        return result

    loop.step = recording_step
    loop.run()

    assert seen[0].edge_threshold == 100
    assert seen[0].kernel_size == 5
    assert seen[1].edge_threshold == 50
    assert seen[1].kernel_size == 1


def test_motion_reaches_contour_window() -> None:
    ui = UiConfig()
    shapes = [MovingRect(x=20, y=20, width=24, height=24, dx=3, appear_at=3)]
    display = HeadlessDisplay()
    loop = _loop(SimulatedSource(width=128, height=96, shapes=shapes), display, max_frames=6, ui=ui)

    loop.run()

    assert len(loop.last_result.hierarchy) == 1
    assert display.frames[ui.contour_window].any()
    assert display.frames[loop.mask_window].any()


def test_mask_window_named_after_contour_model() -> None:
    config = replace(AppConfig(), background=BackgroundConfig(contour_variant=BackgroundVariant.MIXTURE))
    display = HeadlessDisplay(keys=[QUIT])
    loop = _loop(SimulatedSource(width=32, height=24), display, config=config)

    loop.run()

    assert loop.mask_window == "FG Mask MOG2"
    assert "FG Mask MOG2" in display.frames
    assert "FG Mask KNN" not in display.frames


def test_control_binding_failure_still_releases_source() -> None:
    source = SimulatedSource(width=32, height=24)
    loop = _loop(source, _NoTrackbars())

    with pytest.raises(RuntimeError, match="trackbars unavailable"):
        loop.run()

    assert source.release_count == 1
    assert loop.state is LoopState.STOPPED


def test_source_stats_recorded_on_stop() -> None:
    source = SimulatedSource(width=32, height=24)
    loop = _loop(source, HeadlessDisplay(), max_frames=3)

    assert loop.source_stats is None
    loop.run()

    assert loop.source_stats.frames_read == 3
    assert loop.source_stats.read_failures == 0
