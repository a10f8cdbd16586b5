"""Tests for per-frame pipeline processing."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from app.pipeline import MODEL_ORDER, PipelineContext, process_frame
from capture import MovingRect, SimulatedSource
from configs.settings import AppConfig
from detect.config import BackgroundConfig, BackgroundVariant
from detect.mixture_model import MixtureBackgroundModel
from detect.neighbor_model import NeighborBackgroundModel


def _run(source: SimulatedSource, context: PipelineContext, frames: int):
    source.open()
    results = []
    for _ in range(frames):
        frame = source.read_frame()
        results.append(process_frame(context, frame))
    return results


@pytest.fixture
def context() -> PipelineContext:
    return PipelineContext.from_config(AppConfig())


def test_context_from_config_builds_both_models(context: PipelineContext) -> None:
    assert list(context.models) == list(MODEL_ORDER)
    assert isinstance(context.models[BackgroundVariant.MIXTURE], MixtureBackgroundModel)
    assert isinstance(context.models[BackgroundVariant.NEIGHBOR], NeighborBackgroundModel)
    assert context.contour_variant is BackgroundVariant.NEIGHBOR
    assert context.parameters.edge_threshold == 100
    assert context.parameters.kernel_size == 5


def test_static_scene_yields_no_contours(context: PipelineContext) -> None:
    results = _run(SimulatedSource(width=80, height=60), context, frames=15)

    for result in results:
        assert not result.cleaned_mask.any()
        assert all(not mask.any() for mask in result.masks.values())
        assert result.hierarchy.is_empty
        assert not result.overlay.any()
    assert context.frames_processed == 15


@pytest.mark.parametrize("variant", list(BackgroundVariant))
def test_moving_rectangles_produce_one_contour_each(variant: BackgroundVariant) -> None:
    config = replace(AppConfig(), background=BackgroundConfig(contour_variant=variant))
    context = PipelineContext.from_config(config)
    shapes = [
        MovingRect(x=10, y=20, width=20, height=20, dx=2, appear_at=5),
        MovingRect(x=100, y=60, width=24, height=18, dx=-2, dy=1, appear_at=5),
    ]
    results = _run(SimulatedSource(width=160, height=120, shapes=shapes), context, frames=8)

    assert all(result.hierarchy.is_empty for result in results[:5])
    last = results[-1]
    assert len(last.hierarchy) == 2
    assert last.overlay.shape == (120, 160, 3)
    assert last.overlay.any()


def test_raw_masks_exposed_alongside_cleaned_copy(context: PipelineContext) -> None:
    shapes = [MovingRect(x=30, y=30, width=16, height=16, dx=1, appear_at=3)]
    results = _run(SimulatedSource(width=96, height=72, shapes=shapes), context, frames=6)

    last = results[-1]
    assert set(last.masks) == set(BackgroundVariant)
    raw = last.masks[BackgroundVariant.NEIGHBOR]
    assert last.cleaned_mask is not raw
    assert raw.any()
    assert (last.cleaned_mask[raw == 255] == 255).all()
    assert last.masks[BackgroundVariant.MIXTURE].any()
    assert last.cleaned_mask.shape == (72, 96)


def test_frame_size_changes_reinitialize_models(context: PipelineContext) -> None:
    source = SimulatedSource(width=80, height=60, size_schedule={3: (160, 120), 6: (40, 30)})
    results = _run(source, context, frames=8)

    shapes = [result.cleaned_mask.shape for result in results]
    assert shapes == [(60, 80)] * 3 + [(120, 160)] * 3 + [(30, 40)] * 2
    assert all(result.overlay.shape[:2] == result.cleaned_mask.shape for result in results)
    for model in context.models.values():
        assert model.reinit_count == 2
    assert context.frame_shape == (30, 40)


def test_frame_uses_current_parameters_not_pending(context: PipelineContext) -> None:
    source = SimulatedSource(width=40, height=30)
    source.open()
    context.parameters.set_kernel_size(9)
    context.parameters.set_edge_threshold(7)

    result = process_frame(context, source.read_frame())

    assert result.parameters.kernel_size == 5
    assert result.parameters.edge_threshold == 100
    assert context.cleaner.kernel_size == 5


def test_mask_values_are_binary(context: PipelineContext) -> None:
    shapes = [MovingRect(x=5, y=5, width=10, height=10, dx=3, appear_at=2)]
    results = _run(SimulatedSource(width=64, height=48, shapes=shapes), context, frames=5)

    for result in results:
        for mask in result.masks.values():
            assert set(np.unique(mask)) <= {0, 255}
