"""Per-pixel nearest-neighbor (sample history) background model (OpenCV KNN)."""

from __future__ import annotations

from typing import Any, Optional

import cv2

from detect.config import BackgroundVariant, NeighborModelConfig
from detect.subtractor import SubtractorModel


class NeighborBackgroundModel(SubtractorModel):
    """Bounded history of recent samples per pixel.

    A pixel is background when at least ``knn_samples`` stored samples lie
    within ``dist2_threshold`` (squared color distance) of the current
    sample. ``n_samples`` bounds each history tier and ``history`` sets how
    fast old samples are replaced.
    """

    variant = BackgroundVariant.NEIGHBOR
    label = "Neighbor model"

    def __init__(self, config: Optional[NeighborModelConfig] = None) -> None:
        self._config = config or NeighborModelConfig()
        super().__init__()

    @property
    def config(self) -> NeighborModelConfig:
        return self._config

    def _build(self) -> Any:
        cfg = self._config
        subtractor = cv2.createBackgroundSubtractorKNN(
            history=cfg.history,
            dist2Threshold=cfg.dist2_threshold,
            detectShadows=False,
        )
        subtractor.setNSamples(cfg.n_samples)
        subtractor.setkNNSamples(cfg.knn_samples)
        return subtractor

    def _seed_passes(self) -> int:
        # A stored sample only counts toward background once knn_samples
        # earlier samples agreed with it, so 2 * knn_samples passes are needed.
        return 2 * self._config.knn_samples
