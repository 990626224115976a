"""Test configuration and fixtures for photostream.

Images are synthesized with Pillow into tmp_path, so the suite needs no test media.
"""

import threading
from pathlib import Path

import pytest
from PIL import Image

from photostream.domain.config import ResizerConfig
from photostream.resizer import StreamResizer


class RecordingCallback:
    """ResizeCallback that records every delivery and the thread it arrived on."""

    def __init__(self):
        self.completed: list[Image.Image] = []
        self.failed: list[Exception] = []
        self.threads: list[str] = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def on_resize_complete(self, resized):
        with self._lock:
            self.completed.append(resized)
            self.threads.append(threading.current_thread().name)
        self.event.set()

    def on_resize_failed(self, error):
        with self._lock:
            self.failed.append(error)
            self.threads.append(threading.current_thread().name)
        self.event.set()

    @property
    def calls(self) -> int:
        return len(self.completed) + len(self.failed)

    def wait(self, timeout: float = 5.0):
        assert self.event.wait(timeout), "callback was not delivered in time"


@pytest.fixture
def make_image(tmp_path: Path):
    """Factory writing a solid-color image and returning its path."""

    def _make(
        width: int,
        height: int,
        color=(200, 30, 30),
        fmt: str = "PNG",
        name: str | None = None,
        mode: str = "RGB",
        **save_kwargs,
    ) -> Path:
        path = tmp_path / (name or f"img_{width}x{height}.{fmt.lower()}")
        Image.new(mode, (width, height), color).save(path, format=fmt, **save_kwargs)
        return path

    return _make


@pytest.fixture
def banded_image(tmp_path: Path) -> Path:
    """100x50 image: 25px green, 50px red, 25px blue vertical bands."""
    img = Image.new("RGB", (100, 50), (255, 0, 0))
    img.paste((0, 255, 0), (0, 0, 25, 50))
    img.paste((0, 0, 255), (75, 0, 100, 50))
    path = tmp_path / "banded.png"
    img.save(path)
    return path


@pytest.fixture
def make_resizer():
    """Factory for headless resizers; every resizer is shut down after the test."""
    created: list[StreamResizer] = []

    def _make(max_workers: int = 2, **config_kwargs) -> StreamResizer:
        config = ResizerConfig(max_workers=max_workers, headless=True, **config_kwargs)
        resizer = StreamResizer.from_config(config)
        created.append(resizer)
        return resizer

    yield _make

    for resizer in created:
        resizer.shutdown(cancel_pending=True)


@pytest.fixture
def resizer(make_resizer) -> StreamResizer:
    return make_resizer()


@pytest.fixture
def callback() -> RecordingCallback:
    return RecordingCallback()
