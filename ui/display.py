"""Display sinks and interactive parameter controls."""

from __future__ import annotations

import time
from collections import deque
from typing import TYPE_CHECKING, Deque, Dict, Iterable, List, Optional, Protocol, Sequence

import cv2
import numpy as np

from detect.contours import MAX_EDGE_THRESHOLD
from detect.morphology import MAX_KERNEL_SIZE
from log_config.logger import get_logger

if TYPE_CHECKING:
    from app.parameters import ParameterStore

logger = get_logger(__name__)

NO_KEY = -1
EDGE_TRACKBAR = "Canny thresh"
KERNEL_TRACKBAR = "Kernel size"


class DisplaySink(Protocol):
    def show(self, window_name: str, image: np.ndarray) -> None:
        """Display ``image`` in the named window."""

    def poll_key(self, wait_ms: int) -> int:
        """Wait up to ``wait_ms`` for a key press; NO_KEY if none."""

    def bind_parameters(self, window_name: str, store: "ParameterStore") -> None:
        """Attach adjustable controls for each parameter to ``window_name``."""

    def close(self) -> None:
        """Tear down any windows."""


class OpenCVDisplay:
    """HighGUI windows with trackbars feeding a ParameterStore."""

    def __init__(self, window_names: Sequence[str]) -> None:
        self._window_names = list(window_names)
        self._created = False

    @property
    def window_names(self) -> List[str]:
        return list(self._window_names)

    def open(self) -> None:
        if self._created:
            return
        for name in self._window_names:
            cv2.namedWindow(name)
        self._created = True
        logger.debug(f"Created windows: {', '.join(self._window_names)}")

    def bind_parameters(self, window_name: str, store: "ParameterStore") -> None:
        self.open()
        cv2.createTrackbar(
            EDGE_TRACKBAR,
            window_name,
            store.edge_threshold,
            MAX_EDGE_THRESHOLD,
            store.set_edge_threshold,
        )
        # HighGUI trackbars have a fixed minimum of 0; the store clamps 0 to 1.
        cv2.createTrackbar(
            KERNEL_TRACKBAR,
            window_name,
            store.kernel_size,
            MAX_KERNEL_SIZE,
            store.set_kernel_size,
        )

    def show(self, window_name: str, image: np.ndarray) -> None:
        self.open()
        cv2.imshow(window_name, image)

    def poll_key(self, wait_ms: int) -> int:
        return cv2.waitKey(wait_ms)

    def close(self) -> None:
        if self._created:
            cv2.destroyAllWindows()
            self._created = False


class HeadlessDisplay:
    """Display sink that keeps the last image per window instead of drawing.

    ``keys`` are returned by successive ``poll_key`` calls; afterwards
    NO_KEY is returned. With ``pace`` the poll sleeps for ``wait_ms``.
    """

    def __init__(self, keys: Iterable[int] = (), pace: bool = False) -> None:
        self._keys: Deque[int] = deque(keys)
        self._pace = pace
        self.frames: Dict[str, np.ndarray] = {}
        self.show_counts: Dict[str, int] = {}
        self.bound_windows: List[str] = []
        self.store: Optional["ParameterStore"] = None
        self.closed = False

    def show(self, window_name: str, image: np.ndarray) -> None:
        self.frames[window_name] = image
        self.show_counts[window_name] = self.show_counts.get(window_name, 0) + 1

    def poll_key(self, wait_ms: int) -> int:
        if self._pace:
            time.sleep(wait_ms / 1000.0)
        if self._keys:
            return self._keys.popleft()
        return NO_KEY

    def bind_parameters(self, window_name: str, store: "ParameterStore") -> None:
        self.bound_windows.append(window_name)
        self.store = store

    def close(self) -> None:
        self.closed = True
