"""Capture module."""

from .opencv_source import OpenCVSource
from .simulated_source import MovingRect, SimulatedSource
from .video_source import SourceStats, VideoSource

__all__ = ["MovingRect", "OpenCVSource", "SimulatedSource", "SourceStats", "VideoSource"]
