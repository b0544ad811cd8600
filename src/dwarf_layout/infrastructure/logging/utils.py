#!/usr/bin/env python3

"""Logging helpers shared by every module."""

import logging
from collections.abc import Callable
from functools import wraps
from time import perf_counter
from typing import Any, TypeVar, cast

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance below the root configured by LoggerSetup
    """
    return logging.getLogger(name)


def log_timing(func: F) -> F:
    """
    Decorator logging the wall time of a call at debug level.

    Failures are logged at debug level only and re-raised; the single
    user-facing diagnostic is emitted by the CLI entry point.

    Args:
        func: Function to decorate

    Returns:
        Wrapped function
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger(func.__module__)
        func_name = func.__qualname__
        start = perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.debug(f"{func_name} aborted after {perf_counter() - start:.3f}s: {e}")
            raise

        logger.debug(f"{func_name} finished in {perf_counter() - start:.3f}s")
        return result

    return cast("F", wrapper)
