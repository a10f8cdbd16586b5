from __future__ import annotations

import logging
from dataclasses import dataclass


LOGGER = logging.getLogger("telemetry")


@dataclass(frozen=True)
class TimingRecord:
    source_id: str
    frame_index: int
    elapsed_ms: float
    budget_ms: float


def log_timing(source_id: str, frame_index: int, elapsed_ms: float, budget_ms: float) -> TimingRecord:
    record = TimingRecord(
        source_id=source_id, frame_index=frame_index, elapsed_ms=elapsed_ms, budget_ms=budget_ms
    )
    LOGGER.debug(
        "pipeline.timing source=%s frame=%d elapsed_ms=%.3f budget_ms=%.3f",
        record.source_id,
        record.frame_index,
        record.elapsed_ms,
        record.budget_ms,
    )
    if elapsed_ms > budget_ms:
        LOGGER.warning(
            "pipeline.timing_budget_exceeded source=%s frame=%d elapsed_ms=%.3f budget_ms=%.3f",
            record.source_id,
            record.frame_index,
            record.elapsed_ms,
            record.budget_ms,
        )
    return record
