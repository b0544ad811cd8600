#!/usr/bin/env python3

"""Infrastructure layer: configuration and logging for inspection runs."""

from . import config, logging

__all__ = [
    "config",
    "logging",
]
