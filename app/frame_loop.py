"""Frame loop state machine driving capture, processing, and display."""

from __future__ import annotations

import time
from enum import Enum
from typing import Optional

from app.pipeline import FrameResult, PipelineContext, process_frame
from capture.video_source import SourceStats, VideoSource
from configs.settings import UiConfig
from detect import telemetry
from exceptions import FrameReadError
from log_config.logger import get_logger
from ui.display import NO_KEY, DisplaySink
from ui.drawing import draw_frame_number

logger = get_logger(__name__)


class LoopState(Enum):
    """Frame loop states. STOPPED is terminal."""
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class FrameLoop:
    """Single-threaded acquire -> process -> display -> poll loop.

    Each iteration fully processes one frame before the next is read. The
    key poll is the only wait and also paces the loop. A quit key (or
    ``max_frames``) moves the loop to STOPPING; a failed read moves it
    straight to STOPPED. The source is released on every exit path.
    """

    def __init__(
        self,
        source: VideoSource,
        display: DisplaySink,
        context: PipelineContext,
        ui: Optional[UiConfig] = None,
        frame_budget_ms: float = 33.0,
        max_frames: Optional[int] = None,
    ) -> None:
        self._source = source
        self._display = display
        self._context = context
        self._ui = ui or UiConfig()
        self._frame_budget_ms = frame_budget_ms
        self._max_frames = max_frames
        self._state: Optional[LoopState] = None
        self._last_result: Optional[FrameResult] = None
        self._source_stats: Optional[SourceStats] = None
        self._mask_window = self._ui.mask_window_for(context.contour_variant)

    @property
    def state(self) -> Optional[LoopState]:
        return self._state

    @property
    def context(self) -> PipelineContext:
        return self._context

    @property
    def last_result(self) -> Optional[FrameResult]:
        return self._last_result

    @property
    def source_stats(self) -> Optional[SourceStats]:
        """Capture diagnostics read after the source was released."""
        return self._source_stats

    @property
    def mask_window(self) -> str:
        return self._mask_window

    def run(self) -> int:
        """Run until a quit key, ``max_frames``, or a read failure.

        Returns:
            Number of frames processed

        Raises:
            FrameReadError: If a frame could not be read (after release)
            RuntimeError: If the loop has already run
        """
        if self._state is not None:
            raise RuntimeError(f"FrameLoop cannot restart from state {self._state.value}")

        self._transition(LoopState.RUNNING)
        try:
            self._display.bind_parameters(self._ui.contour_window, self._context.parameters)
            while self._state is LoopState.RUNNING:
                self.step()
        except FrameReadError as exc:
            if exc.end_of_stream:
                logger.warning(f"Stream ended: {exc}")
            else:
                logger.error(f"Frame read failed: {exc}")
            self._transition(LoopState.STOPPED)
            raise
        finally:
            self._source.release()
            self._source_stats = self._source.get_stats()
            logger.info(
                f"Source {self._source.source_id}: {self._source_stats.frames_read} frames read, "
                f"{self._source_stats.read_failures} read failures, "
                f"{self._source_stats.fps_avg:.1f} fps average"
            )
            if self._state is not LoopState.STOPPED:
                self._transition(LoopState.STOPPED)
        return self._context.frames_processed

    def step(self) -> FrameResult:
        """Process exactly one frame and poll for the stop signal."""
        if self._context.parameters.apply_pending():
            logger.debug("Pending parameter changes applied at frame boundary")

        frame = self._source.read_frame()
        if frame is None:
            raise FrameReadError(
                "Unable to read next frame: end of stream",
                source_id=self._source.source_id,
                end_of_stream=True,
            )

        start = time.perf_counter()
        result = process_frame(self._context, frame)
        self._emit(result)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        telemetry.log_timing(frame.source_id, frame.frame_index, elapsed_ms, self._frame_budget_ms)
        self._last_result = result

        key = self._display.poll_key(self._ui.wait_ms)
        if key != NO_KEY and (key & 0xFF) in self._ui.quit_keys:
            logger.info(f"Quit key {key & 0xFF} received")
            self._transition(LoopState.STOPPING)
        elif self._max_frames is not None and self._context.frames_processed >= self._max_frames:
            logger.info(f"Reached max frames ({self._max_frames})")
            self._transition(LoopState.STOPPING)
        return result

    def _emit(self, result: FrameResult) -> None:
        source_view = result.frame.image
        if self._ui.show_frame_number:
            source_view = draw_frame_number(source_view, result.frame.frame_index)
        self._display.show(self._ui.source_window, source_view)
        self._display.show(self._mask_window, result.cleaned_mask)
        self._display.show(self._ui.contour_window, result.overlay)

    def _transition(self, state: LoopState) -> None:
        previous = self._state.value if self._state is not None else "idle"
        logger.debug(f"FrameLoop {previous} -> {state.value}")
        self._state = state
