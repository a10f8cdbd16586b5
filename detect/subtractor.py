"""Cold-start and resize handling around OpenCV background subtractors."""

from __future__ import annotations

from typing import Any, Optional, Tuple

import cv2
import numpy as np

from contracts import FOREGROUND
from detect.config import BackgroundVariant
from detect.utils import check_dimensions, empty_mask
from exceptions import DimensionMismatchError
from log_config.logger import get_logger

logger = get_logger(__name__)


class SubtractorModel:
    """Base for models backed by a ``cv2.BackgroundSubtractor``.

    The first frame after construction, ``reset`` or a size change seeds a
    fresh subtractor and is reported as all background, so a cold start
    assumes an empty scene. Later frames return the subtractor's mask as
    uint8 0/255.

    Subclasses implement ``_build`` and may override ``_seed_passes`` and
    ``_apply``.
    """

    variant: BackgroundVariant
    label = "Background model"

    def __init__(self) -> None:
        self._subtractor = self._build()
        self._shape: Optional[Tuple[int, int]] = None
        self.frames_seen = 0
        self.reinit_count = 0

    @property
    def subtractor(self) -> Any:
        return self._subtractor

    @property
    def shape(self) -> Optional[Tuple[int, int]]:
        return self._shape

    def reset(self) -> None:
        self._subtractor = self._build()
        self._shape = None
        self.frames_seen = 0

    def update(self, image: np.ndarray) -> np.ndarray:
        """Feed one frame, return its uint8 foreground mask (0 or 255)."""
        try:
            check_dimensions(self._shape, image)
        except DimensionMismatchError as exc:
            logger.warning(f"{self.label}: {exc}; reinitializing background state")
            self.reset()
            self.reinit_count += 1

        self.frames_seen += 1
        if self._shape is None:
            return self._seed(image)

        _, mask = cv2.threshold(self._apply(image), 127, FOREGROUND, cv2.THRESH_BINARY)
        return mask

    def _seed(self, image: np.ndarray) -> np.ndarray:
        self._shape = (int(image.shape[0]), int(image.shape[1]))
        passes = self._seed_passes()
        for _ in range(passes):
            self._apply(image)
        logger.debug(
            f"{self.label} seeded at {self._shape[1]}x{self._shape[0]} with {passes} pass(es)"
        )
        return empty_mask(self._shape)

    def _build(self) -> Any:
        raise NotImplementedError

    def _seed_passes(self) -> int:
        return 1

    def _apply(self, image: np.ndarray) -> np.ndarray:
        return self._subtractor.apply(image)
