#!/usr/bin/env python3

"""Layout inspection orchestrator (Application Layer).

Wires the components of one run together:
- SectionLoader: main object plus debug-link companion -> DWARFInfo
- UnitIndex: every compilation unit, materialised once
- ClassEnumerator + SearchFilter: candidate selection and deduplication
- LayoutPrinter: text rendering to the output stream
"""

from pathlib import Path
from typing import TextIO

from ..core import SectionLoader, UnitIndex
from ..domain.services import ClassEnumerator, LayoutPrinter, SearchFilter
from ..infrastructure.logging import ProgressTracker, get_logger, log_timing

logger = get_logger(__name__)


class LayoutInspector:
    """Prints the layouts of the classes found in a binary's DWARF info.

    Use as a context manager: the loader's files stay open, and the unit
    index alive, until exit.
    """

    def __init__(self, shared_object_path: Path):
        """
        Initialize the inspector.

        Args:
            shared_object_path: Binary to inspect
        """
        self.shared_object_path = shared_object_path
        self.loader = SectionLoader(shared_object_path)
        self.index: UnitIndex | None = None

    def __enter__(self) -> "LayoutInspector":
        """Context manager entry - loads DWARF sections and indexes units."""
        self.loader.__enter__()
        try:
            self.index = UnitIndex(self.loader.load_dwarf_info())
        except BaseException:
            self.loader.close()
            raise
        return self

    def __exit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object | None
    ) -> None:
        """Context manager exit - drops the index before closing files."""
        self.index = None
        self.loader.__exit__(exc_type, exc_val, exc_tb)

    @log_timing
    def dump(
        self,
        search_filter: SearchFilter,
        stream: TextIO | None = None,
        include_structs: bool = False,
        recurse_namespaces: bool = False,
    ) -> int:
        """
        Print every matching class layout.

        Args:
            search_filter: Predicate selecting the classes to print
            stream: Output stream (defaults to standard output)
            include_structs: Also consider structures and unions
            recurse_namespaces: Also consider classes nested in namespaces

        Returns:
            Number of classes printed
        """
        if self.index is None:
            raise RuntimeError("LayoutInspector used outside its context")

        tracker = ProgressTracker(logger)
        enumerator = ClassEnumerator(
            self.index,
            include_structs=include_structs,
            recurse_namespaces=recurse_namespaces,
            tracker=tracker,
        )
        printer = LayoutPrinter(stream, tracker=tracker)

        with tracker.track_operation(f"dump layouts of {self.shared_object_path.name}"):
            printed = printer.print_entries(enumerator.iter_matching(search_filter))

        tracker.report_summary()
        return printed
