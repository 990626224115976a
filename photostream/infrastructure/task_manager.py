# photostream/infrastructure/task_manager.py
"""
Cancellable resize futures and the task manager that runs them.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, ThreadPoolExecutor
from typing import Generic, TypeVar

from photostream.domain.data_models import TaskState
from photostream.infrastructure.dispatch import CallbackContext, QueueCallbackContext
from photostream.shared.constants import DEFAULT_LOAD_WORKERS, LOAD_THREAD_PREFIX

logger = logging.getLogger("PhotoStream.task_manager")

T = TypeVar("T")


class ResizeFuture(Generic[T]):
    """
    A unit of work with a cancellable lifecycle:

        PENDING -> RUNNING -> COMPLETED | FAILED
        PENDING | RUNNING -> CANCELLED

    Terminal states never change. The `on_done` observer runs exactly once, on the
    thread that moved the future into its terminal state.
    Cancelling a running future does not interrupt the work; its outcome is discarded.
    """

    def __init__(
        self,
        work: Callable[[], T],
        on_done: Callable[["ResizeFuture[T]"], None] | None = None,
        name: str = "",
    ):
        self._work = work
        self._on_done = on_done
        self.name = name or getattr(work, "__name__", "resize-task")

        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._state = TaskState.PENDING
        self._result: T | None = None
        self._exception: BaseException | None = None

    def __repr__(self):
        return f"<ResizeFuture {self.name} state={self._state.name}>"

    @property
    def state(self) -> TaskState:
        return self._state

    def run(self):
        """Executes the work on the calling thread. Does nothing unless the future is pending."""
        with self._lock:
            if self._state is not TaskState.PENDING:
                return
            self._state = TaskState.RUNNING

        try:
            value = self._work()
        except Exception as e:
            self._settle(TaskState.FAILED, exception=e)
        except BaseException as e:
            # Settle before propagating so waiters and the observer are not left hanging.
            self._settle(TaskState.FAILED, exception=e)
            raise
        else:
            self._settle(TaskState.COMPLETED, result=value)

    def _settle(self, state: TaskState, result: T | None = None, exception: BaseException | None = None):
        with self._lock:
            if self._state is TaskState.CANCELLED:
                logger.debug(f"{self.name} finished after cancellation; outcome discarded.")
                return
            self._state = state
            self._result = result
            self._exception = exception
        self._finished.set()
        self._notify()

    def cancel(self) -> bool:
        """
        Cancels the future unless it already completed or failed.
        Returns True if the future is cancelled after the call. Idempotent.
        """
        with self._lock:
            if self._state is TaskState.CANCELLED:
                return True
            if self._state in (TaskState.COMPLETED, TaskState.FAILED):
                return False
            self._state = TaskState.CANCELLED
        self._finished.set()
        self._notify()
        return True

    def _notify(self):
        if self._on_done is None:
            return
        try:
            self._on_done(self)
        except Exception as e:
            logger.error(f"Completion hook failed for {self.name}: {e}", exc_info=True)

    def cancelled(self) -> bool:
        return self._state is TaskState.CANCELLED

    def running(self) -> bool:
        return self._state is TaskState.RUNNING

    def done(self) -> bool:
        return self._state.is_terminal

    def result(self, timeout: float | None = None) -> T:
        """
        Waits for the outcome. Raises CancelledError if cancelled, TimeoutError if
        the timeout expires, or the work's own exception if it failed.
        """
        if not self._finished.wait(timeout):
            raise TimeoutError(f"{self.name} did not finish within {timeout}s")
        if self._state is TaskState.CANCELLED:
            raise CancelledError(self.name)
        if self._exception is not None:
            raise self._exception
        return self._result

    def exception(self, timeout: float | None = None) -> BaseException | None:
        if not self._finished.wait(timeout):
            raise TimeoutError(f"{self.name} did not finish within {timeout}s")
        if self._state is TaskState.CANCELLED:
            raise CancelledError(self.name)
        return self._exception


class TaskManager:
    """
    Owns the two execution contexts of the pipeline: the load pool that runs
    decode/fit/composite work, and the callback context that runs result delivery.
    """

    def __init__(
        self,
        headless: bool = True,
        max_workers: int = DEFAULT_LOAD_WORKERS,
        thread_name_prefix: str = LOAD_THREAD_PREFIX,
        callback_context: CallbackContext | None = None,
    ):
        """
        Args:
            headless: If True, callbacks run on a dedicated consumer thread; otherwise on the Qt main thread.
            max_workers: Number of load threads.
            thread_name_prefix: Name prefix for load threads.
            callback_context: Externally owned context. When given, shutdown() leaves it open.
        """
        self.headless = headless
        self._lock = threading.Lock()
        self._in_flight: set[ResizeFuture] = set()

        self._load_pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)

        self._owns_context = callback_context is None
        if callback_context is None:
            if headless:
                callback_context = QueueCallbackContext().start()
            else:
                # Imported lazily so headless use never loads Qt.
                from photostream.infrastructure.qt_dispatch import QtCallbackContext

                callback_context = QtCallbackContext()
        self.callback_context = callback_context

        logger.info(f"TaskManager initialized (Headless: {headless}, Workers: {max_workers})")

    def submit(self, future: ResizeFuture[T]) -> ResizeFuture[T]:
        """Queues the future on the load pool and returns it without waiting."""
        with self._lock:
            self._in_flight.add(future)

        def _run():
            try:
                future.run()
            finally:
                with self._lock:
                    self._in_flight.discard(future)

        try:
            self._load_pool.submit(_run)
        except RuntimeError:
            with self._lock:
                self._in_flight.discard(future)
            raise
        return future

    def post_callback(self, fn: Callable[[], None]):
        """Hands a closure to the callback context."""
        self.callback_context.post(fn)

    def in_flight(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def shutdown(self, wait: bool = True, cancel_pending: bool = False):
        """
        Stops the load pool and, if owned, the callback context.

        Args:
            wait: Block until running work has finished.
            cancel_pending: Cancel every future that has not finished yet (no callbacks fire for them).

        Without `wait`, unfinished futures are cancelled as well, since the callback
        context is closed before they could deliver.
        """
        logger.info("Stopping TaskManager...")

        if cancel_pending or not wait:
            with self._lock:
                pending = list(self._in_flight)
            for future in pending:
                future.cancel()

        self._load_pool.shutdown(wait=wait)

        if self._owns_context:
            self.callback_context.close()
