"""Custom exception classes for the motion detection pipeline."""

from __future__ import annotations

from typing import Optional, Sequence


class MotionDetectError(Exception):
    """Base exception for all motion detection errors."""

    pass


class ConfigError(MotionDetectError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)


class CaptureError(MotionDetectError):
    """Base exception for capture-source errors."""

    def __init__(self, message: str, source_id: Optional[str] = None):
        self.source_id = source_id
        super().__init__(message)


class SourceUnavailableError(CaptureError):
    """Raised when a camera or video file cannot be opened."""

    pass


class FrameReadError(CaptureError):
    """Raised when a frame cannot be read or the stream has ended."""

    def __init__(
        self,
        message: str,
        source_id: Optional[str] = None,
        end_of_stream: bool = False,
    ):
        self.end_of_stream = end_of_stream
        super().__init__(message, source_id=source_id)


class DetectionError(MotionDetectError):
    """Base exception for detection-related errors."""

    pass


class DimensionMismatchError(DetectionError):
    """Raised when a frame no longer matches the background state dimensions."""

    def __init__(self, expected: Sequence[int], actual: Sequence[int]):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Frame size {self.actual[1]}x{self.actual[0]} does not match "
            f"background state {self.expected[1]}x{self.expected[0]}"
        )
