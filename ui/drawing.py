"""Drawing functions for rendering frames and contour overlays."""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from contracts import ContourHierarchy

BANNER_TOP_LEFT = (10, 2)
BANNER_BOTTOM_RIGHT = (100, 20)
BANNER_COLOR = (0xD3, 0xD3, 0xD3)
TEXT_ORIGIN = (15, 15)


def draw_frame_number(image: np.ndarray, frame_index: int) -> np.ndarray:
    """Return a copy of ``image`` with the frame number in a light-gray banner."""
    annotated = image.copy()
    cv2.rectangle(annotated, BANNER_TOP_LEFT, BANNER_BOTTOM_RIGHT, BANNER_COLOR, -1)
    cv2.putText(
        annotated,
        str(frame_index),
        TEXT_ORIGIN,
        cv2.FONT_HERSHEY_SIMPLEX,
        0.5,
        (0, 0, 0),
    )
    return annotated


def render_contours(
    hierarchy: ContourHierarchy,
    shape: Optional[Tuple[int, int]] = None,
    thickness: int = 2,
) -> np.ndarray:
    """Draw each contour in its assigned color on a black BGR canvas.

    Args:
        hierarchy: Contours to draw
        shape: (height, width) of the canvas; defaults to the hierarchy's shape
        thickness: Line thickness in pixels

    Returns:
        uint8 (H, W, 3) overlay image
    """
    height, width = shape if shape is not None else hierarchy.shape
    drawing = np.zeros((height, width, 3), dtype=np.uint8)
    if hierarchy.is_empty:
        return drawing

    points = hierarchy.point_arrays()
    links = hierarchy.links.reshape(1, -1, 4)
    for index, contour in enumerate(hierarchy.contours):
        cv2.drawContours(
            drawing,
            points,
            index,
            contour.color,
            thickness,
            cv2.LINE_8,
            links,
            0,
        )
    return drawing
