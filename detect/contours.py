"""Edge detection and outer-contour tracing on cleaned foreground masks."""

from __future__ import annotations

from typing import List, Optional

import cv2
import numpy as np

from contracts import Color, Contour, ContourHierarchy
from detect.config import ContourConfig
from log_config.logger import get_logger

logger = get_logger(__name__)

MIN_EDGE_THRESHOLD = 0
MAX_EDGE_THRESHOLD = 255


def normalize_edge_threshold(threshold: int) -> int:
    """Clamp ``threshold`` into [MIN_EDGE_THRESHOLD, MAX_EDGE_THRESHOLD]."""
    value = int(threshold)
    clamped = min(max(value, MIN_EDGE_THRESHOLD), MAX_EDGE_THRESHOLD)
    if clamped != value:
        logger.debug(f"Edge threshold {value} clamped to {clamped}")
    return clamped


def assign_colors(count: int, seed: int) -> List[Color]:
    """Draw ``count`` BGR colors from a generator seeded with ``seed``.

    The same seed always yields the same sequence, so contour ``i`` keeps
    its color across frames and runs.
    """
    if count <= 0:
        return []
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 255, size=(count, 3))
    return [(int(b), int(g), int(r)) for b, g, r in values]


class ContourExtractor:
    def __init__(self, config: Optional[ContourConfig] = None) -> None:
        self._config = config or ContourConfig()

    @property
    def config(self) -> ContourConfig:
        return self._config

    def edges(self, mask: np.ndarray, threshold: int) -> np.ndarray:
        """Blur ``mask`` and run Canny with hysteresis thresholds (t, 2t)."""
        low = normalize_edge_threshold(threshold)
        blur_size = self._config.blur_size
        smoothed = cv2.blur(mask, (blur_size, blur_size)) if blur_size > 1 else mask
        return cv2.Canny(
            smoothed,
            low,
            low * 2,
            apertureSize=self._config.aperture_size,
        )

    def extract(self, mask: np.ndarray, threshold: int) -> ContourHierarchy:
        """Trace the outer boundaries of edge regions found in ``mask``.

        Only corner points are kept along each boundary. Holes are not
        retained, so the hierarchy holds sibling links only.
        """
        edge_map = self.edges(mask, threshold)
        # OpenCV 3 returns (image, contours, hierarchy); 4+ returns (contours, hierarchy).
        found = cv2.findContours(edge_map, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        points, links = found[-2], found[-1]
        if links is None or len(points) == 0:
            return ContourHierarchy(shape=mask.shape[:2])

        colors = assign_colors(len(points), self._config.color_seed)
        contours = [
            Contour(points=contour_points, color=color)
            for contour_points, color in zip(points, colors)
        ]
        return ContourHierarchy(
            contours=contours,
            links=np.asarray(links, dtype=np.int32).reshape(-1, 4),
            shape=mask.shape[:2],
        )
