"""Command-line entry point for the motion detector."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from app.frame_loop import FrameLoop
from app.pipeline import PipelineContext
from capture import OpenCVSource, VideoSource
from capture.video_source import SourceIdentifier
from configs.settings import AppConfig, load_config
from exceptions import ConfigError, FrameReadError, SourceUnavailableError
from log_config.logger import enable_file_logging, get_logger, set_console_level
from ui.display import DisplaySink, HeadlessDisplay, OpenCVDisplay

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motion-detect",
        description=(
            "Detect moving regions with mixture and nearest-neighbor background "
            "models. Press 'q' or ESC to quit."
        ),
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--video", type=Path, metavar="PATH", help="Play back a video file.")
    source.add_argument(
        "--camera",
        action="store_true",
        help="Capture from the live camera (default when no source is given).",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file.")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Process frames without opening any windows.",
    )
    parser.add_argument(
        "--max-frames",
        type=_positive_int,
        default=None,
        help="Stop after this many frames.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Console log level.",
    )
    parser.add_argument("--log-dir", type=Path, default=None, help="Also write log files here.")
    return parser


def build_display(config: AppConfig, headless: bool) -> DisplaySink:
    if headless:
        return HeadlessDisplay()
    ui = config.ui
    return OpenCVDisplay(
        [
            ui.source_window,
            ui.mask_window_for(config.background.contour_variant),
            ui.contour_window,
        ]
    )


def run_pipeline(
    config: AppConfig,
    source: VideoSource,
    display: DisplaySink,
    identifier: SourceIdentifier = None,
    max_frames: Optional[int] = None,
) -> int:
    """Open ``source``, run the frame loop, and map failures to an exit status."""
    try:
        if not source.open(identifier):
            raise SourceUnavailableError(
                f"Unable to open video source: {identifier if identifier is not None else 'camera'}",
                source_id=source.source_id,
            )
        loop = FrameLoop(
            source,
            display,
            PipelineContext.from_config(config),
            ui=config.ui,
            frame_budget_ms=config.telemetry.frame_budget_ms,
            max_frames=max_frames,
        )
        frames = loop.run()
    except SourceUnavailableError as exc:
        logger.error(str(exc))
        return EXIT_FAILURE
    except FrameReadError as exc:
        logger.error(f"Exiting after read failure: {exc}")
        return EXIT_FAILURE
    finally:
        source.release()
        display.close()

    logger.info(f"Processed {frames} frames")
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    set_console_level(args.log_level)
    if args.log_dir is not None:
        enable_file_logging(args.log_dir)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    source = OpenCVSource(
        camera_index=config.capture.camera_index,
        downscale_live=config.capture.downscale_live,
        open_timeout_s=config.capture.open_timeout_s,
    )
    identifier = str(args.video) if args.video is not None else None
    display = build_display(config, args.headless)
    return run_pipeline(config, source, display, identifier, args.max_frames)


if __name__ == "__main__":
    sys.exit(main())
