#!/usr/bin/env python3

"""Text rendering of class layouts.

Output format, one block per class with a blank line between blocks:

    struct Point { // 8 bytes
        int x; // 4 bytes, 0-4
        int y; // 4 bytes, 4-8
    };
"""

import sys
from collections.abc import Iterable
from typing import TextIO

from ...core import ContextEntry
from ...infrastructure.logging import ProgressTracker, get_logger
from ..models import ClassLayout, FieldLayout
from .layout_builder import build_class_layout

logger = get_logger(__name__)

INDENT = "    "


def format_field(field_layout: FieldLayout) -> str:
    return (
        f"{INDENT}{field_layout.type_name} {field_layout.name}; "
        f"// {field_layout.size} bytes, {field_layout.start}-{field_layout.end}"
    )


def format_class(layout: ClassLayout) -> str:
    """Render one class block without a trailing newline."""
    lines = [f"struct {layout.name} {{ // {layout.byte_size} bytes"]
    lines.extend(format_field(field_layout) for field_layout in layout.fields)
    lines.append("};")
    return "\n".join(lines)


class LayoutPrinter:
    """Writes class layouts to a text stream as they are produced."""

    def __init__(self, stream: TextIO | None = None, tracker: ProgressTracker | None = None):
        """
        Initialize the printer.

        Args:
            stream: Destination (defaults to standard output)
            tracker: Optional progress tracker counting printed classes
        """
        self.stream = stream if stream is not None else sys.stdout
        self.tracker = tracker
        self.printed = 0

    def print_layout(self, layout: ClassLayout) -> None:
        """Write one class block, preceded by a blank line unless it is the first."""
        if self.printed > 0:
            self.stream.write("\n")
        self.stream.write(format_class(layout) + "\n")
        self.printed += 1

        if self.tracker is not None:
            self.tracker.count_printed()
        logger.debug(f"Printed {layout.name} ({len(layout.fields)} fields)")

    def print_entries(self, entries: Iterable[ContextEntry]) -> int:
        """
        Build and print the layout of every entry.

        Args:
            entries: Class entries, already filtered and deduplicated

        Returns:
            Number of classes printed by this call
        """
        before = self.printed
        for entry in entries:
            self.print_layout(build_class_layout(entry))
        return self.printed - before
