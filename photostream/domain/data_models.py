# photostream/domain/data_models.py
"""
Contains the primary data structures (dataclasses, enums and protocols) shared
by the codec, the fit calculator and the task pipeline. Centralizing these keeps
type usage consistent and avoids circular imports.
"""

import io
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import BinaryIO, Protocol, TypeAlias

from PIL import Image

# A decoded image. Width, height and mode (pixel config) come from Pillow.
PixelBuffer: TypeAlias = Image.Image

# Anything the codec can open: a filesystem path or an open binary stream.
ImageSource: TypeAlias = str | Path | BinaryIO | io.BytesIO


class ResizeOperation(Enum):
    CENTER_CROP = auto()
    FIT_IN_SPACE = auto()
    LOAD_APPROXIMATE = auto()
    LOAD_AS_IS = auto()


class TaskState(Enum):
    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    CANCELLED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.FAILED, TaskState.CANCELLED)


@dataclass(frozen=True, slots=True)
class FitTransform:
    """
    Scale and translation mapping a decoded source onto an output buffer.

    Coordinates follow the usual image convention: output = source * scale + translate.
    """

    scale_x: float
    scale_y: float
    translate_x: float
    translate_y: float
    out_width: int
    out_height: int

    def __post_init__(self):
        for value in (self.scale_x, self.scale_y):
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"Scale must be a positive finite number, got {value}")
        if self.out_width <= 0 or self.out_height <= 0:
            raise ValueError(f"Output size must be positive, got {self.out_width}x{self.out_height}")

    def scaled_size(self, source_width: int, source_height: int) -> tuple[float, float]:
        """Size of the source rectangle after scaling, before cropping."""
        return source_width * self.scale_x, source_height * self.scale_y

    @property
    def is_identity(self) -> bool:
        return self.scale_x == 1 and self.scale_y == 1 and self.translate_x == 0 and self.translate_y == 0

    def affine_data(self) -> tuple[float, float, float, float, float, float]:
        """
        Inverse affine coefficients for Image.transform(..., Transform.AFFINE).
        Pillow maps each output pixel (x, y) back to (a*x + b*y + c, d*x + e*y + f) in the source.
        """
        return (
            1.0 / self.scale_x,
            0.0,
            -self.translate_x / self.scale_x,
            0.0,
            1.0 / self.scale_y,
            -self.translate_y / self.scale_y,
        )


@dataclass(frozen=True, slots=True)
class ResizeRequest:
    """Describes one unit of work submitted to the pipeline."""

    operation: ResizeOperation
    source: ImageSource
    width: int | None = None
    height: int | None = None

    def describe(self) -> str:
        source = self.source if isinstance(self.source, (str, Path)) else type(self.source).__name__
        if self.width is None:
            return f"{self.operation.name}({source})"
        return f"{self.operation.name}({source}, {self.width}x{self.height})"


class ResizeCallback(Protocol):
    """
    Receives the outcome of a resize task on the callback context.
    Exactly one of the two methods is called per task that was not cancelled.
    """

    def on_resize_complete(self, resized: PixelBuffer) -> None: ...
    def on_resize_failed(self, error: Exception) -> None: ...


class FunctionCallback:
    """Adapts a pair of plain callables to the ResizeCallback protocol."""

    def __init__(
        self,
        on_finish: Callable[[PixelBuffer], None],
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.on_finish = on_finish
        self.on_error = on_error

    def on_resize_complete(self, resized: PixelBuffer) -> None:
        self.on_finish(resized)

    def on_resize_failed(self, error: Exception) -> None:
        if self.on_error:
            self.on_error(error)
