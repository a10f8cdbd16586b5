"""Per-pixel Gaussian mixture background model (OpenCV MOG2)."""

from __future__ import annotations

from typing import Any, Optional

import cv2
import numpy as np

from detect.config import BackgroundVariant, MixtureModelConfig
from detect.subtractor import SubtractorModel


class MixtureBackgroundModel(SubtractorModel):
    """Adaptive mixture of weighted Gaussians per pixel.

    A sample matches a component when its squared distance to the mean is
    below ``var_threshold`` times the component variance. Components sorted
    by weight that together hold up to ``background_ratio`` of the mass are
    background; a pixel is foreground when its sample matches none of them.
    Unmatched samples replace the weakest component.
    """

    variant = BackgroundVariant.MIXTURE
    label = "Mixture model"

    def __init__(self, config: Optional[MixtureModelConfig] = None) -> None:
        self._config = config or MixtureModelConfig()
        super().__init__()

    @property
    def config(self) -> MixtureModelConfig:
        return self._config

    def _build(self) -> Any:
        cfg = self._config
        subtractor = cv2.createBackgroundSubtractorMOG2(
            history=cfg.history,
            varThreshold=cfg.var_threshold,
            detectShadows=False,
        )
        subtractor.setNMixtures(cfg.n_components)
        subtractor.setBackgroundRatio(cfg.background_ratio)
        subtractor.setVarInit(cfg.var_init)
        subtractor.setVarMin(cfg.var_min)
        subtractor.setVarMax(cfg.var_max)
        return subtractor

    def _apply(self, image: np.ndarray) -> np.ndarray:
        return self._subtractor.apply(image, learningRate=self._config.learning_rate)
