"""Configuration loading for the motion detector."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from configs.validator import validate_config
from detect.config import (
    BackgroundConfig,
    BackgroundVariant,
    ContourConfig,
    MixtureModelConfig,
    NeighborModelConfig,
)
from exceptions import InvalidConfigError
from log_config.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yaml")


@dataclass(frozen=True)
class CaptureConfig:
    camera_index: int = 0
    downscale_live: bool = True
    open_timeout_s: float = 5.0


@dataclass(frozen=True)
class ParametersConfig:
    edge_threshold: int = 100
    kernel_size: int = 5


@dataclass(frozen=True)
class UiConfig:
    source_window: str = "Source"
    mask_window: str = "FG Mask"
    contour_window: str = "Contours"
    wait_ms: int = 30
    quit_keys: Tuple[int, ...] = (ord("q"), 27)
    show_frame_number: bool = True

    def mask_window_for(self, variant: BackgroundVariant) -> str:
        """Title of the cleaned-mask window for the model feeding the contours."""
        return f"{self.mask_window} {BackgroundVariant(variant).value.upper()}"


@dataclass(frozen=True)
class TelemetryConfig:
    frame_budget_ms: float = 33.0


@dataclass(frozen=True)
class AppConfig:
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    parameters: ParametersConfig = field(default_factory=ParametersConfig)
    background: BackgroundConfig = field(default_factory=BackgroundConfig)
    contours: ContourConfig = field(default_factory=ContourConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file (packaged default.yaml when None)

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    # Validate against JSON Schema
    validate_config(data)
    return config_from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    """Build an AppConfig from an already validated mapping."""
    try:
        logger.debug("Parsing configuration sections")
        background_data = data.get("background", {})
        background = BackgroundConfig(
            contour_variant=BackgroundVariant(
                background_data.get("contour_variant", BackgroundVariant.NEIGHBOR.value)
            ),
            mixture=MixtureModelConfig(**background_data.get("mixture", {})),
            neighbor=NeighborModelConfig(**background_data.get("neighbor", {})),
        )
        ui_data = dict(data.get("ui", {}))
        if "quit_keys" in ui_data:
            ui_data["quit_keys"] = tuple(ui_data["quit_keys"])

        return AppConfig(
            capture=CaptureConfig(**data.get("capture", {})),
            parameters=ParametersConfig(**data["parameters"]),
            background=background,
            contours=ContourConfig(**data.get("contours", {})),
            ui=UiConfig(**ui_data),
            telemetry=TelemetryConfig(**data.get("telemetry", {})),
        )
    except KeyError as e:
        logger.error(f"Missing required configuration key: {e}")
        raise InvalidConfigError(f"Missing required configuration key: {e}")
    except (TypeError, ValueError) as e:
        logger.error(f"Invalid configuration value: {e}")
        raise InvalidConfigError(f"Invalid configuration value: {e}")
