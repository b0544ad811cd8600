#!/usr/bin/env python3

"""Root logger configuration for the layout inspector."""

import logging
import sys
from datetime import datetime
from pathlib import Path

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerSetup:
    """Configures logging once per process.

    Standard output carries the printed layouts, so console diagnostics go to
    standard error. A debug log file is written only when a log directory is
    configured.
    """

    _initialized = False
    _log_file_path: Path | None = None
    _handlers: list[logging.Handler] = []

    @classmethod
    def initialize(cls, log_dir: Path | None = None, verbose: bool = False) -> None:
        """
        Initialize the logging system.

        Args:
            log_dir: Directory for a timestamped debug log file, or None for
                console logging only
            verbose: If True, console shows DEBUG; otherwise WARNING and above
        """
        if cls._initialized:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)
        cls._handlers.append(console_handler)

        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            cls._log_file_path = log_dir / f"dwarf_layout_{timestamp}.log"

            file_handler = logging.FileHandler(cls._log_file_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            root_logger.addHandler(file_handler)
            cls._handlers.append(file_handler)

        cls._initialized = True

        logger = logging.getLogger(__name__)
        if cls._log_file_path is not None:
            logger.info(f"Logging initialized. Log file: {cls._log_file_path}")
        logger.debug(f"Verbose mode: {verbose}")

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        """Get the current log file path."""
        return cls._log_file_path

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if logging has been initialized."""
        return cls._initialized

    @classmethod
    def reset(cls) -> None:
        """Remove and close the handlers installed by :meth:`initialize`."""
        root_logger = logging.getLogger()
        while cls._handlers:
            handler = cls._handlers.pop()
            root_logger.removeHandler(handler)
            handler.close()
        cls._initialized = False
        cls._log_file_path = None
