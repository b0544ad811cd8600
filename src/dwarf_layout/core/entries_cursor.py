#!/usr/bin/env python3

"""Depth-first cursor and child iteration over the DIEs of one CU.

pyelftools parses DIEs on demand by offset but exposes no cursor. DWARF
serialises the DIE tree in prefix order: a DIE with children is followed by
its children and a null entry closing the child list. The cursor below walks
that stream directly so direct children can be listed without building the
whole tree first, jumping over grandchildren with DW_AT_sibling when the
producer emitted it.
"""

from collections.abc import Iterator

from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.die import DIE

from ..infrastructure.logging import get_logger
from .models import CU_RELATIVE_REFERENCE_FORMS, DEBUG_INFO_REFERENCE_FORMS, DWAttribute

logger = get_logger(__name__)


def unit_end_offset(unit: CompileUnit) -> int:
    """Return the .debug_info offset one past the last byte of ``unit``."""
    return unit.cu_offset + unit["unit_length"] + unit.structs.initial_length_field_size()


class EntriesCursor:
    """Cursor over the DIE stream of a compilation unit.

    The cursor starts *before* the DIE at ``offset``; the first call to
    :meth:`next_dfs` positions it on that DIE with a depth delta of 0.
    """

    def __init__(self, unit: CompileUnit, offset: int | None = None) -> None:
        self.unit = unit
        self._end = unit_end_offset(unit)
        self._next_offset = unit.cu_die_offset if offset is None else offset
        self._current: DIE | None = None

    @property
    def current(self) -> DIE | None:
        """DIE the cursor is positioned on, None before start or when exhausted."""
        return self._current

    def next_dfs(self) -> tuple[int, DIE] | None:
        """Move to the next non-null DIE in document order.

        Returns:
            Tuple of (depth delta relative to the previous DIE, DIE), or None
            when the unit is exhausted
        """
        delta = 1 if self._current is not None and self._current.has_children else 0

        while self._next_offset < self._end:
            die = self._read(self._next_offset)
            if die.is_null():
                delta -= 1
                continue
            self._current = die
            return delta, die

        self._current = None
        return None

    def next_sibling(self) -> DIE | None:
        """Move to the next sibling of the current DIE, skipping its subtree.

        Returns:
            Sibling DIE, or None when the current sibling list is exhausted
        """
        if self._current is None:
            return None

        if self._current.has_children:
            self._next_offset = self._subtree_end(self._current)

        if self._next_offset >= self._end:
            self._current = None
            return None

        die = self._read(self._next_offset)
        self._current = None if die.is_null() else die
        return self._current

    def _read(self, offset: int) -> DIE:
        die = self.unit.get_DIE_from_refaddr(offset)
        self._next_offset = die.offset + die.size
        return die

    def _subtree_end(self, die: DIE) -> int:
        """Offset of the entry following ``die`` and all of its descendants."""
        sibling = die.attributes.get(DWAttribute.SIBLING.value)
        if sibling is not None:
            if sibling.form in CU_RELATIVE_REFERENCE_FORMS:
                return self.unit.cu_offset + sibling.value
            if sibling.form in DEBUG_INFO_REFERENCE_FORMS:
                return sibling.value
            logger.debug(
                f"Ignoring DW_AT_sibling with form {sibling.form} at 0x{die.offset:x}"
            )

        depth = 1
        offset = die.offset + die.size
        while depth > 0 and offset < self._end:
            entry = self.unit.get_DIE_from_refaddr(offset)
            offset = entry.offset + entry.size
            if entry.is_null():
                depth -= 1
            elif entry.has_children:
                depth += 1
        return offset


class EntryChildrenIterator:
    """Single-pass iterator over the direct children of the cursor's DIE.

    The cursor must already be positioned on the parent. The iterator owns the
    cursor from then on and cannot be restarted.
    """

    def __init__(self, cursor: EntriesCursor) -> None:
        self._cursor = cursor
        self._is_first = True
        self._done = False

    def __iter__(self) -> Iterator[DIE]:
        return self

    def __next__(self) -> DIE:
        if self._done:
            raise StopIteration

        if self._is_first:
            self._is_first = False
            step = self._cursor.next_dfs()
            child = step[1] if step is not None and step[0] == 1 else None
        else:
            child = self._cursor.next_sibling()

        if child is None:
            self._done = True
            raise StopIteration
        return child
