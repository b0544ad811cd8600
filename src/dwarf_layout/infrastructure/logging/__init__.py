#!/usr/bin/env python3

"""Logging, call timing and traversal progress for the inspector."""

from .logger_setup import LoggerSetup
from .progress_tracker import ProgressTracker
from .utils import get_logger, log_timing

__all__ = [
    "LoggerSetup",
    "ProgressTracker",
    "get_logger",
    "log_timing",
]
