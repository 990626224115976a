# photostream/infrastructure/qt_dispatch.py
"""
Qt callback context: delivers resize callbacks on the Qt main thread.
"""

import logging
from collections.abc import Callable

from PySide6.QtCore import QObject, Qt, Signal, Slot

from photostream.infrastructure.dispatch import invoke_callback

logger = logging.getLogger("PhotoStream.qt_dispatch")


class QtCallbackContext(QObject):
    """
    Hands closures posted from load threads to the event loop of the thread that
    created this object. Construct it on the GUI thread.
    Must inherit QObject to use Signals.
    """

    callback_posted = Signal(object)  # Carries a zero-argument callable

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._closed = False
        # Queued: the slot always runs in this object's thread, never the emitter's.
        self.callback_posted.connect(self._run_callback, Qt.ConnectionType.QueuedConnection)

    def post(self, fn: Callable[[], None]):
        if self._closed:
            logger.warning("Qt callback context is closed; dropping posted callback.")
            return
        self.callback_posted.emit(fn)

    @Slot(object)
    def _run_callback(self, fn: Callable[[], None]):
        invoke_callback(fn)

    def close(self):
        self._closed = True
