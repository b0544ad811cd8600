#!/usr/bin/env python3

"""Progress tracking for DWARF traversal."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from time import time

from elftools.dwarf.compileunit import CompileUnit


class ProgressTracker:
    """
    Track and report traversal progress.

    Counts compilation units, candidate DIEs and printed classes, and times
    named operations for the debug log.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize progress tracker.

        Args:
            logger: Logger instance for progress reporting
        """
        self.logger = logger
        self.start_time = time()
        self.cu_count = 0
        self.candidate_count = 0
        self.printed_count = 0
        self.operation_stack: list[str] = []

    @contextmanager
    def track_operation(self, operation_name: str) -> Iterator[None]:
        """
        Time a high-level operation.

        Args:
            operation_name: Name of the operation being tracked

        Yields:
            None
        """
        start_time = time()
        self.operation_stack.append(operation_name)
        self.logger.debug(f"Starting operation: {operation_name}")

        try:
            yield
            elapsed = time() - start_time
            self.logger.debug(f"Completed operation: {operation_name} in {elapsed:.3f}s")
        finally:
            self.operation_stack.pop()

    @contextmanager
    def track_cu(self, cu: CompileUnit) -> Iterator[None]:
        """
        Track the traversal of one compilation unit.

        Args:
            cu: Compilation unit being walked

        Yields:
            None
        """
        self.cu_count += 1
        cu_start = time()
        initial_candidates = self.candidate_count

        self.logger.debug(f"Walking CU #{self.cu_count} at 0x{cu.cu_offset:x}")

        yield

        self.logger.debug(
            f"CU #{self.cu_count} walked in {time() - cu_start:.3f}s "
            f"({self.candidate_count - initial_candidates} candidate classes)"
        )

    def count_candidate(self) -> None:
        """Increment the sized-class candidate counter."""
        self.candidate_count += 1

    def count_printed(self) -> None:
        """Increment the printed-class counter."""
        self.printed_count += 1

    def report_summary(self) -> None:
        """Report final traversal statistics."""
        total_time = time() - self.start_time
        self.logger.info(
            f"Processing complete: {self.cu_count} CUs, {self.candidate_count} "
            f"candidate classes, {self.printed_count} printed in {total_time:.2f}s"
        )

