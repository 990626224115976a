# photostream/cli.py
"""
Command Line Interface (Headless Mode) for PhotoStream.
"""

import argparse
import logging
import sys
import threading
from pathlib import Path

# NOTE: We do NOT import PySide6 here.
# The resizer is built headless, so callbacks run on a plain consumer thread.
from photostream.domain.config import ResizerConfig
from photostream.domain.data_models import PixelBuffer
from photostream.infrastructure.task_manager import ResizeFuture
from photostream.resizer import StreamResizer
from photostream.shared.constants import DEFAULT_LOAD_WORKERS, DEFAULT_RESAMPLE, RESAMPLE_FILTERS
from photostream.shared.errors import InvalidArgumentError
from photostream.shared.logger import setup_logging

logger = logging.getLogger("PhotoStream.CLI")

MODES = ("center-crop", "fit", "approx", "as-is")


class HeadlessRunner:
    """
    Runs a single resize request and waits for its callback.
    Implements the ResizeCallback protocol itself.
    """

    def __init__(self, args):
        self.args = args
        self.finished_event = threading.Event()
        self.exit_code = 0

        config = ResizerConfig(
            max_workers=args.workers,
            headless=True,
            resample=args.resample,
            exif_transpose=not args.no_exif,
        )
        self.resizer = StreamResizer.from_config(config)

    def _submit(self) -> ResizeFuture[PixelBuffer]:
        source = Path(self.args.input)
        mode = self.args.mode
        if mode == "center-crop":
            return self.resizer.resize_center_crop(source, self.args.width, self.args.height, self)
        if mode == "fit":
            return self.resizer.fit_in_space(source, self.args.width, self.args.height, self)
        if mode == "approx":
            return self.resizer.load_approximate(source, self.args.width, self.args.height, self)
        return self.resizer.load_as_is(source, self)

    def start(self) -> int:
        """Submits the request and blocks until a callback arrives. Returns the exit code."""
        logger.info(f"Resizing {self.args.input} ({self.args.mode}) -> {self.args.output}")

        try:
            future = self._submit()
        except InvalidArgumentError as e:
            logger.error(f"Invalid arguments: {e}")
            self.resizer.shutdown()
            return 2

        try:
            while not self.finished_event.wait(0.1):
                pass
        except KeyboardInterrupt:
            logger.warning("\nInterrupt received. Cancelling...")
            future.cancel()
            self.exit_code = 130
        finally:
            self.resizer.shutdown(cancel_pending=True)
        return self.exit_code

    def on_resize_complete(self, resized: PixelBuffer):
        output = Path(self.args.output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            resized.save(output)
            logger.info(f"SUCCESS: Wrote {resized.width}x{resized.height} image to {output}")
            self.exit_code = 0
        except (OSError, ValueError) as e:
            logger.error(f"FAILURE: Could not save '{output}': {e}")
            self.exit_code = 1
        self.finished_event.set()

    def on_resize_failed(self, error: Exception):
        logger.error(f"FAILURE: {error}")
        self.exit_code = 1
        self.finished_event.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PhotoStream Headless Resizer")

    # Target
    parser.add_argument("input", help="Path to the source image")
    parser.add_argument("output", help="Path for the resized image (format from extension)")

    # Modes
    parser.add_argument("--mode", choices=MODES, default="center-crop", help="Fitting policy")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)

    # Configuration
    parser.add_argument("--workers", type=int, default=DEFAULT_LOAD_WORKERS)
    parser.add_argument("--resample", choices=sorted(RESAMPLE_FILTERS), default=DEFAULT_RESAMPLE)
    parser.add_argument("--no-exif", action="store_true", help="Ignore EXIF orientation")
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode != "as-is" and (args.width is None or args.height is None):
        parser.error(f"--width and --height are required for mode '{args.mode}'")

    setup_logging(force_debug=args.debug, log_file=None)

    try:
        runner = HeadlessRunner(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2
    return runner.start()


if __name__ == "__main__":
    sys.exit(main())
