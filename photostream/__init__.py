# photostream/__init__.py
from photostream.domain.config import ResizerConfig
from photostream.domain.data_models import FitTransform, FunctionCallback, ResizeCallback, TaskState
from photostream.infrastructure.task_manager import ResizeFuture, TaskManager
from photostream.resizer import StreamResizer
from photostream.shared.errors import DecodeError, InvalidArgumentError, ResizeError, UnexpectedResizeError

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "FitTransform",
    "FunctionCallback",
    "InvalidArgumentError",
    "ResizeCallback",
    "ResizeError",
    "ResizeFuture",
    "ResizerConfig",
    "StreamResizer",
    "TaskManager",
    "TaskState",
    "UnexpectedResizeError",
]
