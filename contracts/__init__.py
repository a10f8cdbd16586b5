"""Shared data contracts for motion detection."""

from .types import (
    BACKGROUND,
    FOREGROUND,
    Color,
    Contour,
    ContourHierarchy,
    Frame,
)

__all__ = [
    "BACKGROUND",
    "FOREGROUND",
    "Color",
    "Contour",
    "ContourHierarchy",
    "Frame",
]
