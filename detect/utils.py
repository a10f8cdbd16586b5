from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from exceptions import DimensionMismatchError


def check_dimensions(expected: Optional[Tuple[int, int]], image: np.ndarray) -> None:
    """Raise DimensionMismatchError if ``image`` no longer fits the state shape."""
    if expected is None:
        return
    actual = image.shape[:2]
    if tuple(actual) != tuple(expected):
        raise DimensionMismatchError(expected, actual)


def empty_mask(shape: Tuple[int, int]) -> np.ndarray:
    return np.zeros(shape, dtype=np.uint8)
