"""Runtime-tunable pipeline parameters."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from detect.contours import normalize_edge_threshold
from detect.morphology import normalize_kernel_size
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Parameters:
    edge_threshold: int = 100
    kernel_size: int = 5


class ParameterStore:
    """Holds the parameters the current frame runs with plus staged edits.

    Setters only stage values (clamped into range). The frame loop calls
    ``apply_pending`` at the top of each iteration, so an edit never takes
    effect mid-frame.
    """

    def __init__(self, edge_threshold: int = 100, kernel_size: int = 5) -> None:
        self._current = Parameters(
            edge_threshold=normalize_edge_threshold(edge_threshold),
            kernel_size=normalize_kernel_size(kernel_size),
        )
        self._pending: Optional[Parameters] = None

    @property
    def current(self) -> Parameters:
        return self._current

    @property
    def edge_threshold(self) -> int:
        return self._current.edge_threshold

    @property
    def kernel_size(self) -> int:
        return self._current.kernel_size

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and self._pending != self._current

    def set_edge_threshold(self, value: int) -> None:
        staged = self._pending or self._current
        self._pending = replace(staged, edge_threshold=normalize_edge_threshold(value))

    def set_kernel_size(self, value: int) -> None:
        staged = self._pending or self._current
        self._pending = replace(staged, kernel_size=normalize_kernel_size(value))

    def apply_pending(self) -> bool:
        """Promote staged edits to current. Returns True if anything changed."""
        if self._pending is None:
            return False
        pending, self._pending = self._pending, None
        if pending == self._current:
            return False
        logger.info(
            f"Parameters updated: edge_threshold {self._current.edge_threshold} -> "
            f"{pending.edge_threshold}, kernel_size {self._current.kernel_size} -> "
            f"{pending.kernel_size}"
        )
        self._current = pending
        return True
