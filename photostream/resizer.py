# photostream/resizer.py
"""
Asynchronous resize pipeline.

Each public operation validates its arguments, wraps the decode/fit/composite work
in a ResizeFuture, queues it on the load pool and returns immediately. When the
work settles, the completion hook posts exactly one callback to the callback
context, unless the future was cancelled, in which case nothing is delivered.
"""

import logging
from collections.abc import Callable
from functools import partial

from PIL import Image

from photostream.domain.config import ResizerConfig
from photostream.domain.data_models import (
    ImageSource,
    PixelBuffer,
    ResizeCallback,
    ResizeOperation,
    ResizeRequest,
)
from photostream.imaging.geometry import approximate_bounds, center_crop_fit, contain_fit, validate_target
from photostream.imaging.image_io import decode_approx, decode_full
from photostream.imaging.processing import apply_fit, resolve_resample
from photostream.infrastructure.task_manager import ResizeFuture, TaskManager
from photostream.shared.errors import InvalidArgumentError, ResizeError, UnexpectedResizeError

logger = logging.getLogger("PhotoStream.resizer")


class StreamResizer:
    """
    Loads images off the caller's thread and delivers display-sized results.

    Operations never block and never raise for runtime failures; those arrive via
    ResizeCallback.on_resize_failed. Invalid target sizes raise InvalidArgumentError
    from the submitting call, before anything is queued.
    """

    def __init__(self, task_manager: TaskManager, config: ResizerConfig | None = None):
        self.task_manager = task_manager
        self.config = config or ResizerConfig(headless=task_manager.headless)
        self._resample = resolve_resample(self.config.resample)

    @classmethod
    def from_config(cls, config: ResizerConfig | None = None) -> "StreamResizer":
        """Creates a resizer with its own TaskManager."""
        config = config or ResizerConfig.from_env()
        config.validate()
        task_manager = TaskManager(
            headless=config.headless,
            max_workers=config.max_workers,
            thread_name_prefix=config.thread_name_prefix,
        )
        return cls(task_manager, config)

    def __enter__(self) -> "StreamResizer":
        return self

    def __exit__(self, *exc_info):
        self.shutdown()

    def shutdown(self, wait: bool = True, cancel_pending: bool = False):
        self.task_manager.shutdown(wait=wait, cancel_pending=cancel_pending)

    # --- Public operations ---

    def resize_center_crop(self, path: ImageSource, width: int, height: int, callback: ResizeCallback) -> ResizeFuture[PixelBuffer]:
        """Decodes near (width, height), then scales to cover and crops the overflow symmetrically."""
        validate_target(width, height)
        request = ResizeRequest(ResizeOperation.CENTER_CROP, path, width, height)

        def work() -> PixelBuffer:
            streamed = decode_approx(path, width, height, exif_transpose=self.config.exif_transpose)
            transform = center_crop_fit(streamed.width, streamed.height, width, height)
            return apply_fit(streamed, transform, self._resample)

        return self._start_task(request, work, callback)

    def fit_in_space(self, path: ImageSource, width: int, height: int, callback: ResizeCallback) -> ResizeFuture[PixelBuffer]:
        """Decodes bounded by the smaller target axis, then scales to fit inside (width, height)."""
        validate_target(width, height)
        request = ResizeRequest(ResizeOperation.FIT_IN_SPACE, path, width, height)

        def work() -> PixelBuffer:
            bound_w, bound_h = approximate_bounds(width, height)
            streamed = decode_approx(path, bound_w, bound_h, exif_transpose=self.config.exif_transpose)
            transform = contain_fit(streamed.width, streamed.height, width, height)
            return apply_fit(streamed, transform, self._resample)

        return self._start_task(request, work, callback)

    def load_approximate(self, path: ImageSource, width: int, height: int, callback: ResizeCallback) -> ResizeFuture[PixelBuffer]:
        """Decodes near (width, height) and returns the decoder's output as-is."""
        validate_target(width, height)
        request = ResizeRequest(ResizeOperation.LOAD_APPROXIMATE, path, width, height)

        def work() -> PixelBuffer:
            return decode_approx(path, width, height, exif_transpose=self.config.exif_transpose)

        return self._start_task(request, work, callback)

    def load_as_is(
        self,
        source: ImageSource,
        callback: ResizeCallback,
        reuse: PixelBuffer | None = None,
    ) -> ResizeFuture[PixelBuffer]:
        """
        Decodes at full resolution from a path or an open binary stream.

        `reuse` is written into when it matches the decoded size and mode. It stays
        owned by the caller and must not be passed to another task that is still in flight.
        """
        if source is None:
            raise InvalidArgumentError("An image path or stream is required.")
        if reuse is not None and not isinstance(reuse, Image.Image):
            raise InvalidArgumentError(f"Reuse buffer must be a PIL image, got {type(reuse).__name__}")
        request = ResizeRequest(ResizeOperation.LOAD_AS_IS, source)

        def work() -> PixelBuffer:
            return decode_full(source, reuse, exif_transpose=self.config.exif_transpose)

        return self._start_task(request, work, callback)

    # --- Submission and delivery ---

    def _start_task(
        self,
        request: ResizeRequest,
        work: Callable[[], PixelBuffer],
        callback: ResizeCallback,
    ) -> ResizeFuture[PixelBuffer]:
        future = ResizeFuture(
            partial(self._execute, request, work),
            on_done=partial(self._deliver, request, callback),
            name=request.describe(),
        )
        logger.debug(f"Submitting {request.describe()}")
        return self.task_manager.submit(future)

    @staticmethod
    def _execute(request: ResizeRequest, work: Callable[[], PixelBuffer]) -> PixelBuffer:
        try:
            return work()
        except ResizeError:
            raise
        except Exception as e:
            raise UnexpectedResizeError(f"{request.describe()} failed: {e}") from e

    def _deliver(self, request: ResizeRequest, callback: ResizeCallback, future: ResizeFuture[PixelBuffer]):
        """Completion hook. Runs on the settling thread; callbacks run on the callback context."""
        if future.cancelled():
            logger.debug(f"{request.describe()} cancelled; no callback.")
            return

        try:
            result = future.result()
        except BaseException as e:
            logger.error(f"Resize task failed: {request.describe()}: {e}", exc_info=True)
            self.task_manager.post_callback(partial(callback.on_resize_failed, e))
        else:
            logger.debug(f"{request.describe()} -> {result.width}x{result.height}")
            self.task_manager.post_callback(partial(callback.on_resize_complete, result))
