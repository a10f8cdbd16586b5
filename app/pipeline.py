"""Per-frame pipeline: background models, mask cleanup, contour extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from app.parameters import Parameters, ParameterStore
from configs.settings import AppConfig
from contracts import ContourHierarchy, Frame
from detect.background import BackgroundModel, create_background_model
from detect.config import BackgroundVariant
from detect.contours import ContourExtractor
from detect.morphology import MaskCleaner
from log_config.logger import get_logger
from ui.drawing import render_contours

logger = get_logger(__name__)

# Update order is fixed: the mixture model always runs before the neighbor model.
MODEL_ORDER = (BackgroundVariant.MIXTURE, BackgroundVariant.NEIGHBOR)


@dataclass
class FrameResult:
    frame: Frame
    parameters: Parameters
    masks: Dict[BackgroundVariant, np.ndarray]
    cleaned_mask: np.ndarray
    hierarchy: ContourHierarchy
    overlay: np.ndarray


@dataclass
class PipelineContext:
    """Everything that lives across frames, owned by the frame loop."""

    parameters: ParameterStore
    models: Dict[BackgroundVariant, BackgroundModel]
    contour_variant: BackgroundVariant = BackgroundVariant.NEIGHBOR
    cleaner: MaskCleaner = field(default_factory=MaskCleaner)
    extractor: ContourExtractor = field(default_factory=ContourExtractor)
    line_thickness: int = 2
    frames_processed: int = 0
    frame_shape: Optional[Tuple[int, int]] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "PipelineContext":
        models = {
            variant: create_background_model(variant, config.background)
            for variant in MODEL_ORDER
        }
        return cls(
            parameters=ParameterStore(
                edge_threshold=config.parameters.edge_threshold,
                kernel_size=config.parameters.kernel_size,
            ),
            models=models,
            contour_variant=config.background.contour_variant,
            extractor=ContourExtractor(config.contours),
            line_thickness=config.contours.line_thickness,
        )


def process_frame(context: PipelineContext, frame: Frame) -> FrameResult:
    """Run one frame through update -> clean -> extract -> render."""
    params = context.parameters.current
    _track_frame_shape(context, frame)

    masks = {
        variant: context.models[variant].update(frame.image)
        for variant in MODEL_ORDER
        if variant in context.models
    }
    # Masks in FrameResult stay raw; the cleaner works on a copy.
    cleaned = context.cleaner.clean(masks[context.contour_variant].copy(), params.kernel_size)
    hierarchy = context.extractor.extract(cleaned, params.edge_threshold)
    overlay = render_contours(hierarchy, cleaned.shape[:2], context.line_thickness)

    context.frames_processed += 1
    return FrameResult(
        frame=frame,
        parameters=params,
        masks=masks,
        cleaned_mask=cleaned,
        hierarchy=hierarchy,
        overlay=overlay,
    )


def _track_frame_shape(context: PipelineContext, frame: Frame) -> None:
    image = frame.image
    shape = (int(image.shape[0]), int(image.shape[1]))
    if context.frame_shape is None:
        channels = image.shape[2] if image.ndim == 3 else 1
        logger.info(
            f"First frame from {frame.source_id}: width={shape[1]} height={shape[0]} "
            f"channels={channels} dtype={image.dtype}"
        )
    elif shape != context.frame_shape:
        logger.warning(
            f"Frame size changed from {context.frame_shape[1]}x{context.frame_shape[0]} "
            f"to {shape[1]}x{shape[0]}"
        )
    context.frame_shape = shape
