#!/usr/bin/env python3

"""Materialised list of compilation units for cross-unit lookups."""

from collections.abc import Iterator
from typing import Optional

from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.die import DIE
from elftools.dwarf.dwarfinfo import DWARFInfo

from ..infrastructure.logging import ProgressTracker, get_logger
from .entries_cursor import unit_end_offset
from .exceptions import UnresolvedReferenceError

logger = get_logger(__name__)


class UnitIndex:
    """Owns every compilation unit of a DWARF image for one inspection run.

    Units are parsed once up front so a DW_FORM_ref_addr reference can be
    resolved against any of them without re-reading .debug_info.
    """

    def __init__(self, dwarf_info: Optional[DWARFInfo]) -> None:
        """
        Materialise all compilation units.

        Args:
            dwarf_info: DWARF information from pyelftools, or None for an
                object without debug information
        """
        self.dwarf_info = dwarf_info
        self.units: list[CompileUnit] = []

        if dwarf_info is None:
            return

        tracker = ProgressTracker(logger)
        with tracker.track_operation("materialise compilation units"):
            self.units = list(dwarf_info.iter_CUs())
        logger.info(f"Indexed {len(self.units)} compilation units")

    def __iter__(self) -> Iterator[CompileUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)

    @staticmethod
    def to_unit_offset(unit: CompileUnit, offset: int) -> int | None:
        """
        Translate a .debug_info offset into an offset relative to ``unit``.

        Args:
            unit: Candidate owning unit
            offset: Offset into .debug_info

        Returns:
            Unit-relative offset, or None if the offset lies outside the
            unit's DIEs
        """
        if unit.cu_die_offset <= offset < unit_end_offset(unit):
            return offset - unit.cu_offset
        return None

    def find_owning_unit(self, offset: int) -> CompileUnit:
        """
        Find the compilation unit containing a .debug_info offset.

        Args:
            offset: Offset into .debug_info

        Returns:
            The unique unit containing the offset

        Raises:
            UnresolvedReferenceError: If no unit contains the offset
        """
        for unit in self.units:
            if self.to_unit_offset(unit, offset) is not None:
                return unit
        raise UnresolvedReferenceError(offset)

    def entry_at(self, offset: int) -> tuple[CompileUnit, DIE]:
        """
        Get the DIE at a .debug_info offset together with its owning unit.

        Args:
            offset: Offset into .debug_info

        Returns:
            Tuple of (owning unit, DIE)
        """
        unit = self.find_owning_unit(offset)
        return unit, unit.get_DIE_from_refaddr(offset)
