import logging

from detect.telemetry import log_timing


def test_log_timing_within_budget(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="telemetry"):
        record = log_timing("sim", 3, elapsed_ms=12.5, budget_ms=33.0)

    assert record.frame_index == 3
    assert record.elapsed_ms == 12.5
    assert "pipeline.timing source=sim frame=3" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_log_timing_over_budget_warns(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="telemetry"):
        log_timing("camera:0", 7, elapsed_ms=50.0, budget_ms=33.0)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "timing_budget_exceeded" in warnings[0].getMessage()
