"""Background model capability and variant selection."""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

import numpy as np

from detect.config import BackgroundConfig, BackgroundVariant
from detect.mixture_model import MixtureBackgroundModel
from detect.neighbor_model import NeighborBackgroundModel


class BackgroundModel(Protocol):
    variant: BackgroundVariant
    reinit_count: int
    frames_seen: int

    @property
    def shape(self) -> Optional[Tuple[int, int]]:
        """(height, width) of the current state, None before the first frame."""

    def update(self, image: np.ndarray) -> np.ndarray:
        """Learn from ``image`` and return its foreground mask."""

    def reset(self) -> None:
        """Drop all learned state; the next frame is a cold start."""


def create_background_model(
    variant: BackgroundVariant | str,
    config: Optional[BackgroundConfig] = None,
) -> BackgroundModel:
    config = config or BackgroundConfig()
    variant = BackgroundVariant(variant)
    if variant == BackgroundVariant.MIXTURE:
        return MixtureBackgroundModel(config.mixture)
    if variant == BackgroundVariant.NEIGHBOR:
        return NeighborBackgroundModel(config.neighbor)
    raise ValueError(f"Unsupported background variant: {variant}")
