from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BackgroundVariant(str, Enum):
    MIXTURE = "mog2"
    NEIGHBOR = "knn"


@dataclass(frozen=True)
class MixtureModelConfig:
    history: int = 500
    n_components: int = 5
    learning_rate: float = 0.002
    background_ratio: float = 0.9
    var_threshold: float = 16.0
    var_init: float = 15.0
    var_min: float = 4.0
    var_max: float = 75.0


@dataclass(frozen=True)
class NeighborModelConfig:
    n_samples: int = 7
    knn_samples: int = 2
    dist2_threshold: float = 400.0
    history: int = 500


@dataclass(frozen=True)
class ContourConfig:
    blur_size: int = 3
    aperture_size: int = 3
    color_seed: int = 12345
    line_thickness: int = 2


@dataclass(frozen=True)
class BackgroundConfig:
    contour_variant: BackgroundVariant = BackgroundVariant.NEIGHBOR
    mixture: MixtureModelConfig = field(default_factory=MixtureModelConfig)
    neighbor: NeighborModelConfig = field(default_factory=NeighborModelConfig)
