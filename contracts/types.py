"""Core data contracts for capture, background modeling, and contour extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

import numpy as np

# Mask labels, stored as uint8 so masks can be shown and fed to OpenCV directly.
BACKGROUND = 0
FOREGROUND = 255

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Frame:
    source_id: str
    frame_index: int
    t_capture_monotonic_ns: int
    image: Any
    width: int
    height: int
    pixfmt: str = "BGR24"

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)


@dataclass(frozen=True)
class Contour:
    """Ordered corner points of one region outline, shaped (N, 1, 2) like OpenCV."""

    points: np.ndarray
    color: Color

    @property
    def bounding_box(self) -> Tuple[int, int, int, int]:
        xs = self.points[:, 0, 0]
        ys = self.points[:, 0, 1]
        return (int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max()))

    def __len__(self) -> int:
        return int(self.points.shape[0])


@dataclass(frozen=True)
class ContourHierarchy:
    """Contours traced from one mask plus their [next, prev, child, parent] links.

    Only outer boundaries are retained, so every parent and child link is -1.
    """

    contours: List[Contour] = field(default_factory=list)
    links: np.ndarray = field(default_factory=lambda: np.empty((0, 4), dtype=np.int32))
    shape: Optional[Tuple[int, int]] = None

    def __len__(self) -> int:
        return len(self.contours)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self.contours)

    @property
    def is_empty(self) -> bool:
        return not self.contours

    @property
    def colors(self) -> List[Color]:
        return [contour.color for contour in self.contours]

    def point_arrays(self) -> List[np.ndarray]:
        return [contour.points for contour in self.contours]
