# photostream/domain/config.py
"""
Contains the configuration dataclass used to parameterize the resize pipeline.
"""

import logging
import os
from dataclasses import dataclass

from photostream.shared.constants import (
    DEFAULT_LOAD_WORKERS,
    DEFAULT_RESAMPLE,
    ENV_EXIF_TRANSPOSE,
    ENV_HEADLESS,
    ENV_RESAMPLE,
    ENV_WORKERS,
    LOAD_THREAD_PREFIX,
    QT_AVAILABLE,
    RESAMPLE_FILTERS,
    TRUTHY_VALUES,
)

logger = logging.getLogger("PhotoStream.config")


@dataclass
class ResizerConfig:
    """Runtime settings for the load executor, callback context and compositor."""

    max_workers: int = DEFAULT_LOAD_WORKERS
    headless: bool = True  # False delivers callbacks on the Qt main thread
    resample: str = DEFAULT_RESAMPLE  # Pillow filter name used by the compositor
    exif_transpose: bool = True  # Apply EXIF orientation after decoding
    thread_name_prefix: str = LOAD_THREAD_PREFIX

    @classmethod
    def from_env(cls) -> "ResizerConfig":
        """Builds a config from PHOTOSTREAM_* environment variables, falling back to defaults."""
        config = cls()

        workers = os.environ.get(ENV_WORKERS)
        if workers:
            try:
                config.max_workers = int(workers)
            except ValueError:
                raise ValueError(f"{ENV_WORKERS} must be a positive integer, got '{workers}'") from None

        headless = os.environ.get(ENV_HEADLESS)
        if headless:
            config.headless = headless.lower() in TRUTHY_VALUES

        resample = os.environ.get(ENV_RESAMPLE)
        if resample:
            config.resample = resample.upper()

        exif = os.environ.get(ENV_EXIF_TRANSPOSE)
        if exif:
            config.exif_transpose = exif.lower() in TRUTHY_VALUES

        config.validate()
        logger.debug(f"Config loaded from environment: {config}")
        return config

    def validate(self):
        """Raises ValueError if any setting is out of range."""
        if not isinstance(self.max_workers, int) or self.max_workers <= 0:
            raise ValueError("Number of load workers must be a positive integer.")
        if self.resample.upper() not in RESAMPLE_FILTERS:
            raise ValueError(f"Unknown resample filter '{self.resample}'. Choose from: {', '.join(RESAMPLE_FILTERS)}")
        if not self.headless and not QT_AVAILABLE:
            raise ValueError("GUI mode requires PySide6. Install it or run headless.")
