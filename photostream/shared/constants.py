# photostream/shared/constants.py
"""
Global constants, file paths, and configuration defaults.
Handles library availability checks and environment lookups.
"""

import importlib.util
import os
from pathlib import Path

from PIL import Image

# --- Core Application Directories ---
# PHOTOSTREAM_HOME overrides the per-user data directory (used by tests and packaged builds).
APP_DATA_DIR = Path(os.environ.get("PHOTOSTREAM_HOME", Path.home() / ".photostream"))

# --- File Paths ---
LOG_FILE = APP_DATA_DIR / "photostream_log.txt"

# --- Environment Variables ---
ENV_DEBUG = "PHOTOSTREAM_DEBUG"
ENV_WORKERS = "PHOTOSTREAM_WORKERS"
ENV_HEADLESS = "PHOTOSTREAM_HEADLESS"
ENV_RESAMPLE = "PHOTOSTREAM_RESAMPLE"
ENV_EXIF_TRANSPOSE = "PHOTOSTREAM_EXIF_TRANSPOSE"

# --- Library Availability Checks ---
QT_AVAILABLE = bool(importlib.util.find_spec("PySide6"))

try:
    Image.init()
    PILLOW_AVAILABLE = True
except (ImportError, NameError):
    PILLOW_AVAILABLE = False

# --- Pipeline Defaults ---
# A small load pool keeps peak memory bounded; decodes are I/O and C-bound so threads suffice.
DEFAULT_LOAD_WORKERS = 2
LOAD_THREAD_PREFIX = "PhotoStream_Load"
CALLBACK_THREAD_NAME = "PhotoStream_Callback"

# Bilinear filtering is off for composites; nearest sampling matches the display path.
DEFAULT_RESAMPLE = "NEAREST"
RESAMPLE_FILTERS = {
    "NEAREST": Image.Resampling.NEAREST,
    "BILINEAR": Image.Resampling.BILINEAR,
    "BICUBIC": Image.Resampling.BICUBIC,
}

# Upper bound on power-of-two subsampling during approximate decode.
MAX_SAMPLE_SIZE = 64

# Seconds to wait for the callback consumer thread on shutdown.
CALLBACK_JOIN_TIMEOUT = 2.0

TRUTHY_VALUES = ("1", "true", "yes", "on")
