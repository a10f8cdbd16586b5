"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["parameters", "background"],
    "properties": {
        "capture": {
            "type": "object",
            "properties": {
                "camera_index": {"type": "integer", "minimum": 0},
                "downscale_live": {"type": "boolean"},
                "open_timeout_s": {"type": "number", "exclusiveMinimum": 0, "maximum": 60},
            },
        },
        "parameters": {
            "type": "object",
            "required": ["edge_threshold", "kernel_size"],
            "properties": {
                "edge_threshold": {"type": "integer", "minimum": 0, "maximum": 255},
                "kernel_size": {"type": "integer", "minimum": 1, "maximum": 21},
            },
        },
        "background": {
            "type": "object",
            "properties": {
                "contour_variant": {"type": "string", "enum": ["mog2", "knn"]},
                "mixture": {
                    "type": "object",
                    "properties": {
                        "history": {"type": "integer", "minimum": 1},
                        "n_components": {"type": "integer", "minimum": 1, "maximum": 10},
                        "learning_rate": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                        "background_ratio": {"type": "number", "exclusiveMinimum": 0.0, "maximum": 1.0},
                        "var_threshold": {"type": "number", "exclusiveMinimum": 0.0},
                        "var_init": {"type": "number", "exclusiveMinimum": 0.0},
                        "var_min": {"type": "number", "exclusiveMinimum": 0.0},
                        "var_max": {"type": "number", "exclusiveMinimum": 0.0},
                    },
                },
                "neighbor": {
                    "type": "object",
                    "properties": {
                        "n_samples": {"type": "integer", "minimum": 1, "maximum": 64},
                        "knn_samples": {"type": "integer", "minimum": 1},
                        "dist2_threshold": {"type": "number", "exclusiveMinimum": 0.0},
                        "history": {"type": "integer", "minimum": 1},
                    },
                },
            },
        },
        "contours": {
            "type": "object",
            "properties": {
                "blur_size": {"type": "integer", "minimum": 1, "maximum": 15},
                "aperture_size": {"type": "integer", "enum": [3, 5, 7]},
                "color_seed": {"type": "integer", "minimum": 0},
                "line_thickness": {"type": "integer", "minimum": 1, "maximum": 10},
            },
        },
        "ui": {
            "type": "object",
            "properties": {
                "source_window": {"type": "string", "minLength": 1},
                "mask_window": {"type": "string", "minLength": 1},
                "contour_window": {"type": "string", "minLength": 1},
                "wait_ms": {"type": "integer", "minimum": 1, "maximum": 1000},
                "quit_keys": {
                    "type": "array",
                    "items": {"type": "integer", "minimum": 0, "maximum": 255},
                    "minItems": 1,
                },
                "show_frame_number": {"type": "boolean"},
            },
        },
        "telemetry": {
            "type": "object",
            "properties": {
                "frame_budget_ms": {"type": "number", "exclusiveMinimum": 0.0},
            },
        },
    },
}


def validate_config(data: Dict[str, Any]) -> None:
    """Validate a configuration mapping against CONFIG_SCHEMA.

    Args:
        data: Parsed YAML configuration

    Raises:
        ConfigValidationError: If validation fails (all errors are collected)
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if not errors:
        logger.debug("Configuration passed schema validation")
        return

    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    for message in messages:
        logger.error(f"Config validation error: {message}")
    raise ConfigValidationError(
        f"Configuration validation failed with {len(messages)} error(s)",
        validation_errors=messages,
    )
