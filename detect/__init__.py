"""Detection module: background models, mask cleanup, and contour extraction."""

from .background import BackgroundModel, create_background_model
from .config import (
    BackgroundConfig,
    BackgroundVariant,
    ContourConfig,
    MixtureModelConfig,
    NeighborModelConfig,
)
from .contours import ContourExtractor, assign_colors
from .mixture_model import MixtureBackgroundModel
from .morphology import MaskCleaner
from .neighbor_model import NeighborBackgroundModel

__all__ = [
    "BackgroundConfig",
    "BackgroundModel",
    "BackgroundVariant",
    "ContourConfig",
    "ContourExtractor",
    "MaskCleaner",
    "MixtureBackgroundModel",
    "MixtureModelConfig",
    "NeighborBackgroundModel",
    "NeighborModelConfig",
    "assign_colors",
    "create_background_model",
]
