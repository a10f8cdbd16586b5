"""Timeout utilities for capture operations."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional, TypeVar

from exceptions import SourceUnavailableError
from log_config.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def run_with_timeout(
    func: Callable[..., T],
    timeout_seconds: float,
    error_message: str = "Operation timed out",
    source_id: Optional[str] = None,
    *args: Any,
    on_abandoned: Optional[Callable[[T], None]] = None,
    **kwargs: Any,
) -> T:
    """Run function with timeout, raise SourceUnavailableError if exceeded.

    Args:
        func: Function to run
        timeout_seconds: Timeout in seconds
        error_message: Error message if timeout occurs
        source_id: Capture source identifier attached to the error
        *args: Positional arguments for func
        on_abandoned: Called with func's result if func finishes after the
            timeout, so a late resource (e.g. an opened capture) is released
        **kwargs: Keyword arguments for func

    Returns:
        Result of func

    Raises:
        SourceUnavailableError: If operation times out
        Exception: Any exception raised by func

    Note:
        No retry is attempted. The worker thread is not interrupted; it
        finishes in the background after the timeout.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError:
        logger.error(f"{error_message} after {timeout_seconds}s")
        if on_abandoned is not None:
            future.add_done_callback(lambda done: _hand_off_late_result(done, on_abandoned))
        raise SourceUnavailableError(
            f"{error_message} after {timeout_seconds}s",
            source_id=source_id,
        )
    finally:
        executor.shutdown(wait=False)


def _hand_off_late_result(future: Future, cleanup: Callable[[Any], None]) -> None:
    if future.cancelled() or future.exception() is not None:
        return
    logger.warning("Timed-out operation completed late; releasing its result")
    cleanup(future.result())


__all__ = ["run_with_timeout"]
