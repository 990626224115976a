# photostream/shared/logger.py
"""
Handles the setup of the application-wide logging system.
Configures Console and File logging destinations.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from photostream.shared.constants import ENV_DEBUG, LOG_FILE, TRUTHY_VALUES


def setup_logging(force_debug: bool = False, log_file: Path | None = LOG_FILE):
    """
    Configures the root logger for the application.

    Args:
        force_debug: Enables DEBUG level regardless of the environment.
        log_file: Destination of the rotating file log. None disables file logging.
    """
    is_debug = force_debug or os.environ.get(ENV_DEBUG, "false").lower() in TRUTHY_VALUES
    log_level = logging.DEBUG if is_debug else logging.INFO

    verbose_formatter = logging.Formatter(
        "%(asctime)s - %(name)-28s - %(levelname)-8s - [%(threadName)s] - %(message)s"
    )

    root_logger = logging.getLogger()

    # Reset existing handlers
    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

    root_logger.setLevel(log_level)

    # --- 3rd Party Library Noise Suppression ---
    logging.getLogger("PIL").setLevel(logging.WARNING)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(verbose_formatter)
    root_logger.addHandler(console_handler)

    # --- File Handler ---
    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(verbose_formatter)
            root_logger.addHandler(file_handler)
        except (OSError, PermissionError) as e:
            print(f"[ERROR] Failed to configure file logger at '{log_file}': {e}", file=sys.stderr)

    root_logger.debug(f"Logging system configured. Level: {logging.getLevelName(log_level)}")
