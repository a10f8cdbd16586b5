"""Simulated capture source producing a synthetic scene for pipeline testing."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import cv2
import numpy as np

from contracts import Frame
from exceptions import FrameReadError

from .video_source import SourceIdentifier, SourceStats, VideoSource


@dataclass(frozen=True)
class MovingRect:
    x: int
    y: int
    width: int
    height: int
    dx: int = 0
    dy: int = 0
    color: Tuple[int, int, int] = (255, 255, 255)
    appear_at: int = 0

    def visible(self, step: int) -> bool:
        return step >= self.appear_at

    def position(self, step: int) -> Tuple[int, int]:
        moved = step - self.appear_at
        return self.x + self.dx * moved, self.y + self.dy * moved


class SimulatedSource(VideoSource):
    """Static background with optional moving rectangles.

    Frames are fully deterministic. ``n_frames`` bounds the stream (None for
    endless), ``fail_at`` raises FrameReadError when that frame index would be
    produced, and ``size_schedule`` switches the frame size from a given frame
    index onward.
    """

    def __init__(
        self,
        width: int = 160,
        height: int = 120,
        shapes: Sequence[MovingRect] = (),
        n_frames: Optional[int] = None,
        background: Tuple[int, int, int] = (40, 30, 20),
        fps: int = 0,
        fail_at: Optional[int] = None,
        size_schedule: Optional[Dict[int, Tuple[int, int]]] = None,
        available: bool = True,
    ) -> None:
        self._width = width
        self._height = height
        self._shapes = list(shapes)
        self._n_frames = n_frames
        self._background = background
        self._fps = fps
        self._fail_at = fail_at
        self._size_schedule = dict(size_schedule or {})
        self._available = available
        self._opened = False
        self._frame_index = 0
        self._last_frame_time = time.monotonic()
        self.release_count = 0

    @property
    def source_id(self) -> str:
        return "sim"

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self, source: SourceIdentifier = None) -> bool:
        self._opened = self._available
        self._frame_index = 0
        return self._opened

    def render(self, step: int) -> np.ndarray:
        width, height = self._size_at(step)
        image = np.empty((height, width, 3), dtype=np.uint8)
        image[:] = self._background
        for shape in self._shapes:
            if not shape.visible(step):
                continue
            x, y = shape.position(step)
            cv2.rectangle(
                image,
                (x, y),
                (x + shape.width - 1, y + shape.height - 1),
                shape.color,
                thickness=-1,
            )
        return image

    def read_frame(self) -> Optional[Frame]:
        if not self._opened:
            raise FrameReadError("Simulated source not opened.", source_id=self.source_id)
        if self._fail_at is not None and self._frame_index == self._fail_at:
            raise FrameReadError(
                f"Simulated read failure at frame {self._frame_index}",
                source_id=self.source_id,
            )
        if self._n_frames is not None and self._frame_index >= self._n_frames:
            return None

        if self._fps > 0:
            target_delay = 1.0 / self._fps
            elapsed = time.monotonic() - self._last_frame_time
            if elapsed < target_delay:
                time.sleep(target_delay - elapsed)
        self._last_frame_time = time.monotonic()

        image = self.render(self._frame_index)
        self._frame_index += 1
        return Frame(
            source_id=self.source_id,
            frame_index=self._frame_index,
            t_capture_monotonic_ns=time.monotonic_ns(),
            image=image,
            width=image.shape[1],
            height=image.shape[0],
        )

    def get_stats(self) -> SourceStats:
        return SourceStats(
            frames_read=self._frame_index,
            read_failures=0,
            fps_avg=float(self._fps),
            fps_instant=float(self._fps),
        )

    def release(self) -> None:
        if self._opened:
            self.release_count += 1
        self._opened = False

    def _size_at(self, step: int) -> Tuple[int, int]:
        size = (self._width, self._height)
        for start in sorted(self._size_schedule):
            if step >= start:
                size = self._size_schedule[start]
        return size
