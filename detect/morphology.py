"""Morphological closing of foreground masks."""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from log_config.logger import get_logger

logger = get_logger(__name__)

MIN_KERNEL_SIZE = 1
MAX_KERNEL_SIZE = 21


def normalize_kernel_size(kernel_size: int) -> int:
    """Clamp ``kernel_size`` into [MIN_KERNEL_SIZE, MAX_KERNEL_SIZE]."""
    size = int(kernel_size)
    clamped = min(max(size, MIN_KERNEL_SIZE), MAX_KERNEL_SIZE)
    if clamped != size:
        logger.debug(f"Kernel size {size} clamped to {clamped}")
    return clamped


class MaskCleaner:
    """Closes masks with a square structuring element.

    The element is rebuilt only when the requested size changes.
    """

    def __init__(self) -> None:
        self._element: Optional[np.ndarray] = None
        self._size = 0

    @property
    def kernel_size(self) -> int:
        return self._size

    def structuring_element(self, kernel_size: int) -> np.ndarray:
        size = normalize_kernel_size(kernel_size)
        if self._element is None or size != self._size:
            self._element = cv2.getStructuringElement(cv2.MORPH_RECT, (size, size))
            self._size = size
            logger.debug(f"Structuring element rebuilt: {size}x{size}")
        return self._element

    def clean(self, mask: np.ndarray, kernel_size: int) -> np.ndarray:
        """Close ``mask`` in place (dilate then erode) and return it."""
        element = self.structuring_element(kernel_size)
        size = self._size
        anchor = size // 2
        mirrored = size - 1 - anchor
        # Eroding with the mirrored anchor keeps even-sized kernels an exact closing.
        dilated = cv2.dilate(mask, element, anchor=(anchor, anchor))
        closed = cv2.erode(dilated, element, anchor=(mirrored, mirrored))
        mask[...] = closed
        return mask
