"""Display sinks and drawing helpers."""

from .display import DisplaySink, HeadlessDisplay, OpenCVDisplay
from .drawing import draw_frame_number, render_contours

__all__ = [
    "DisplaySink",
    "HeadlessDisplay",
    "OpenCVDisplay",
    "draw_frame_number",
    "render_contours",
]
