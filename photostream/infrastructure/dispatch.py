# photostream/infrastructure/dispatch.py
"""
Callback contexts: where resize results are delivered.

A callback context only ever runs callback bodies. The load threads post closures
to it; the context executes them on its own thread, in posting order.
This module is pure Python so headless/CLI use never imports PySide6.
"""

import logging
import queue
import threading
from collections.abc import Callable
from typing import Protocol

from photostream.shared.constants import CALLBACK_JOIN_TIMEOUT, CALLBACK_THREAD_NAME

logger = logging.getLogger("PhotoStream.dispatch")


class CallbackContext(Protocol):
    """Contract shared by the queue-based and Qt-based callback contexts."""

    def post(self, fn: Callable[[], None]) -> None: ...
    def close(self) -> None: ...


def invoke_callback(fn: Callable[[], None]):
    """Runs one posted closure. Exceptions in listeners are logged so the context keeps running."""
    try:
        fn()
    except Exception as e:
        name = getattr(fn, "__name__", None) or getattr(getattr(fn, "func", None), "__name__", repr(fn))
        logger.error(f"Error in resize callback '{name}': {e}", exc_info=True)


class QueueCallbackContext:
    """
    Headless callback context backed by a FIFO queue.

    Either call start() to run a dedicated consumer thread, or pump the queue from
    an existing loop with process_pending(). Do not mix both on the same instance.
    """

    _STOP = object()

    def __init__(self, name: str = CALLBACK_THREAD_NAME):
        self.name = name
        self._queue: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None
        self._closed = False

    @property
    def thread(self) -> threading.Thread | None:
        return self._thread

    def post(self, fn: Callable[[], None]):
        if self._closed:
            logger.warning("Callback context is closed; dropping posted callback.")
            return
        self._queue.put(fn)

    def start(self) -> "QueueCallbackContext":
        """Starts the consumer thread. Calling it twice is a no-op."""
        if self._thread is None:
            self._thread = threading.Thread(target=self.run_forever, name=self.name, daemon=True)
            self._thread.start()
            logger.debug(f"Callback consumer '{self.name}' started.")
        return self

    def run_forever(self):
        """Consumer loop: runs callbacks until close() is called."""
        while True:
            fn = self._queue.get()
            if fn is self._STOP:
                break
            invoke_callback(fn)

    def process_pending(self, timeout: float | None = None) -> int:
        """
        Runs queued callbacks on the calling thread and returns how many ran.

        With a timeout, waits up to that long for the first callback; without one,
        only drains what is already queued.
        """
        count = 0
        block = timeout is not None
        while True:
            try:
                fn = self._queue.get(block=block, timeout=timeout)
            except queue.Empty:
                return count
            block = False
            if fn is self._STOP:
                continue
            invoke_callback(fn)
            count += 1

    def close(self):
        """Stops accepting callbacks and lets the consumer drain what is already queued."""
        if self._closed:
            return
        self._closed = True
        if self._thread is not None:
            self._queue.put(self._STOP)
            if threading.current_thread() is not self._thread:
                self._thread.join(timeout=CALLBACK_JOIN_TIMEOUT)
            logger.debug(f"Callback consumer '{self.name}' stopped.")
