"""OpenCV-based capture source for live cameras and video files."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import cv2

from contracts import Frame
from exceptions import FrameReadError, SourceUnavailableError
from log_config.logger import get_logger, log_performance

from .timeout_utils import run_with_timeout
from .video_source import SourceIdentifier, SourceStats, VideoSource

logger = get_logger(__name__)


@dataclass
class _Stats:
    last_frame_ns: int = 0
    frames: int = 0
    failures: int = 0
    fps_avg: float = 0.0
    fps_instant: float = 0.0


class OpenCVSource(VideoSource):
    def __init__(
        self,
        camera_index: int = 0,
        downscale_live: bool = True,
        open_timeout_s: float = 5.0,
    ) -> None:
        self._camera_index = camera_index
        self._downscale_live = downscale_live
        self._open_timeout_s = open_timeout_s
        self._capture: Optional[cv2.VideoCapture] = None
        self._source_id = "camera"
        self._live = False
        self._stats = _Stats()

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    @property
    def is_live(self) -> bool:
        return self._live

    def open(self, source: SourceIdentifier = None) -> bool:
        """Open a video file, or the configured camera when ``source`` is None.

        Returns:
            True if the capture opened, False otherwise (the failure is logged)
        """
        if self._capture is not None:
            self.release()

        if source is None or isinstance(source, int):
            target = self._camera_index if source is None else source
            self._live = True
            self._source_id = f"camera:{target}"
        else:
            target = str(source)
            self._live = False
            self._source_id = target
        logger.info(f"Opening capture source {self._source_id}")
        started = time.perf_counter()

        def _open_capture() -> cv2.VideoCapture:
            capture = cv2.VideoCapture(target)
            if not capture.isOpened():
                capture.release()
                raise SourceUnavailableError(
                    f"Unable to open capture source {self._source_id}",
                    source_id=self._source_id,
                )
            return capture

        try:
            self._capture = run_with_timeout(
                _open_capture,
                timeout_seconds=self._open_timeout_s,
                error_message=f"Opening {self._source_id} timed out",
                source_id=self._source_id,
                on_abandoned=_release_capture,
            )
        except SourceUnavailableError as exc:
            logger.error(str(exc))
            self._capture = None
            return False

        log_performance(
            f"open {self._source_id}",
            (time.perf_counter() - started) * 1000.0,
            threshold_ms=1000.0,
        )
        self._stats = _Stats()
        logger.info(f"Opened capture source {self._source_id}")
        return True

    def read_frame(self) -> Optional[Frame]:
        if self._capture is None:
            raise FrameReadError("Capture source not opened.", source_id=self._source_id)
        ok, image = self._capture.read()
        if not ok or image is None:
            self._stats.failures += 1
            if not self._live:
                logger.info(f"End of stream on {self._source_id}")
                return None
            raise FrameReadError(
                f"Unable to read next frame from {self._source_id}",
                source_id=self._source_id,
            )

        if self._live and self._downscale_live:
            height, width = image.shape[:2]
            image = cv2.resize(image, (width // 2, height // 2))

        now_ns = time.monotonic_ns()
        if self._stats.last_frame_ns:
            delta_s = (now_ns - self._stats.last_frame_ns) / 1e9
            if delta_s > 0:
                self._stats.fps_instant = 1.0 / delta_s
                self._stats.fps_avg = (
                    (self._stats.fps_avg * self._stats.frames) + self._stats.fps_instant
                ) / (self._stats.frames + 1)
        self._stats.frames += 1
        self._stats.last_frame_ns = now_ns
        return Frame(
            source_id=self._source_id,
            frame_index=self._stats.frames,
            t_capture_monotonic_ns=now_ns,
            image=image,
            width=image.shape[1],
            height=image.shape[0],
            pixfmt="BGR24" if image.ndim == 3 else "GRAY8",
        )

    def get_stats(self) -> SourceStats:
        return SourceStats(
            frames_read=self._stats.frames,
            read_failures=self._stats.failures,
            fps_avg=self._stats.fps_avg,
            fps_instant=self._stats.fps_instant,
        )

    def release(self) -> None:
        """Release the capture. Idempotent."""
        if self._capture is None:
            logger.debug(f"Capture {self._source_id}: Already released")
            return

        logger.info(f"Capture {self._source_id}: Releasing")
        try:
            self._capture.release()
        finally:
            self._capture = None


def _release_capture(capture: cv2.VideoCapture) -> None:
    capture.release()
