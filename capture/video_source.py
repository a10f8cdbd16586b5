"""Capture source abstraction for the frame loop."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

from contracts import Frame

SourceIdentifier = Optional[Union[str, int]]


@dataclass(frozen=True)
class SourceStats:
    frames_read: int
    read_failures: int
    fps_avg: float
    fps_instant: float


class VideoSource(ABC):
    @abstractmethod
    def open(self, source: SourceIdentifier = None) -> bool:
        """Open a file path, or the live camera when ``source`` is None."""

    @abstractmethod
    def read_frame(self) -> Optional[Frame]:
        """Return the next frame, or None at end of stream."""

    @abstractmethod
    def get_stats(self) -> SourceStats:
        """Return capture diagnostics."""

    @abstractmethod
    def release(self) -> None:
        """Release the capture resource. Safe to call more than once."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True between a successful open and release."""

    @property
    def source_id(self) -> str:
        return "source"

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
