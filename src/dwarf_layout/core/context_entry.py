#!/usr/bin/env python3

"""Navigable view of a single DIE together with its lookup context.

A ContextEntry bundles a pyelftools DIE with the compilation unit it lives in
and the UnitIndex of the run. That is everything needed to interpret the DIE's
attributes: CU-relative references resolve in the home unit, references into
.debug_info go through the index and rebind the home unit.

Example: member ``Node* next`` in DWARF:
    member DIE -> DW_AT_type -> pointer_type DIE -> DW_AT_type -> class DIE (Node)

    entry.class_()        -> pointer_type entry, name() == "Node*"
    entry.class_().size_bytes() -> CU address size
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.die import DIE

from ..infrastructure.logging import get_logger
from ..utils.dwarf_location_parser import parse_location_offset
from .entries_cursor import EntriesCursor, EntryChildrenIterator
from .exceptions import MalformedAttributeError, MalformedReferenceError, MissingEntryError
from .models import (
    AGGREGATE_TAGS,
    CU_RELATIVE_REFERENCE_FORMS,
    DEBUG_INFO_REFERENCE_FORMS,
    LAID_OUT_TAGS,
    DWAttribute,
    DWTag,
)

if TYPE_CHECKING:
    from .unit_index import UnitIndex

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class ContextEntry:
    """A DIE plus its home compilation unit and the run's UnitIndex."""

    die: DIE
    unit: CompileUnit
    index: UnitIndex

    @classmethod
    def root(cls, unit: CompileUnit, index: UnitIndex) -> ContextEntry:
        """Entry for the top DIE (DW_TAG_compile_unit) of ``unit``."""
        return cls(unit.get_DIE_from_refaddr(unit.cu_die_offset), unit, index)

    @property
    def tag(self) -> str:
        return self.die.tag

    @property
    def offset(self) -> int:
        """Offset of the DIE in .debug_info."""
        return self.die.offset

    def has_attribute(self, attribute: DWAttribute) -> bool:
        return attribute.value in self.die.attributes

    def iter_children(self) -> Iterator[ContextEntry]:
        """Yield the direct children of this DIE in document order."""
        cursor = EntriesCursor(self.unit, self.die.offset)
        if cursor.next_dfs() is None:
            raise MissingEntryError(self.die.offset, self.unit.cu_offset)
        for child in EntryChildrenIterator(cursor):
            yield ContextEntry(child, self.unit, self.index)

    def name(self) -> str | None:
        """
        Human-readable name of the DIE.

        Returns:
            DW_AT_name if present; for an unnamed pointer, the pointee's name
            followed by ``*``; otherwise None
        """
        attr = self.die.attributes.get(DWAttribute.NAME.value)
        if attr is not None:
            if not isinstance(attr.value, bytes):
                raise MalformedAttributeError(self.offset, DWAttribute.NAME.value, attr.value)
            return attr.value.decode("utf-8", errors="replace")

        if self.tag == DWTag.POINTER_TYPE.value:
            pointee = self.class_()
            if pointee is None:
                return None
            pointee_name = pointee.name()
            return f"{pointee_name}*" if pointee_name is not None else None

        return None

    def size_bytes(self) -> int | None:
        """
        Size of the type described by this DIE.

        Returns:
            DW_AT_byte_size if present; the CU address size for pointers;
            otherwise None
        """
        attr = self.die.attributes.get(DWAttribute.BYTE_SIZE.value)
        if attr is not None:
            if not isinstance(attr.value, int):
                raise MalformedAttributeError(
                    self.offset, DWAttribute.BYTE_SIZE.value, attr.value
                )
            return attr.value

        if self.tag == DWTag.POINTER_TYPE.value:
            return self.unit["address_size"]

        return None

    def member_location(self) -> int | None:
        """Constant byte offset of a member or base class inside its parent."""
        assert self.tag in LAID_OUT_TAGS, f"member_location() on {self.tag}"

        attr = self.die.attributes.get(DWAttribute.DATA_MEMBER_LOCATION.value)
        if attr is None:
            return None
        return parse_location_offset(attr.form, attr.value, self.unit.structs)

    def class_(self) -> ContextEntry | None:
        """
        Follow DW_AT_type to the referenced type.

        Returns:
            Entry for the referenced DIE, or None when the DIE has no type
            (e.g. ``void*``)

        Raises:
            MalformedReferenceError: If DW_AT_type is not a CU-relative or
                .debug_info-relative reference
        """
        attr = self.die.attributes.get(DWAttribute.TYPE.value)
        if attr is None:
            return None

        if attr.form in CU_RELATIVE_REFERENCE_FORMS:
            target = self.unit.get_DIE_from_refaddr(self.unit.cu_offset + attr.value)
            return ContextEntry(target, self.unit, self.index)

        if attr.form in DEBUG_INFO_REFERENCE_FORMS:
            unit, target = self.index.entry_at(attr.value)
            if unit is not self.unit:
                logger.debug(
                    f"Cross-unit reference from 0x{self.offset:x} to 0x{target.offset:x} "
                    f"(CU 0x{unit.cu_offset:x})"
                )
            return ContextEntry(target, unit, self.index)

        raise MalformedReferenceError(self.offset, attr.form)

    def expand_typedefs(self) -> ContextEntry:
        """Follow typedef links to the first non-typedef type in the chain."""
        current = self
        while current.tag == DWTag.TYPEDEF.value:
            target = current.class_()
            if target is None:
                logger.debug(f"Typedef at 0x{current.offset:x} has no target type")
                break
            current = target
        return current

    def iter_base_classes(self) -> Iterator[ContextEntry]:
        """Yield the direct base classes of an aggregate."""
        assert self.tag in AGGREGATE_TAGS, f"iter_base_classes() on {self.tag}"

        for child in self.iter_children():
            if child.tag != DWTag.INHERITANCE.value:
                continue
            base = child.class_()
            if base is not None:
                yield base

    def iter_class_members(self) -> Iterator[ContextEntry]:
        """Yield the data members (members with a location) of an aggregate."""
        assert self.tag in AGGREGATE_TAGS, f"iter_class_members() on {self.tag}"

        for child in self.iter_children():
            if child.tag == DWTag.MEMBER.value and child.member_location() is not None:
                yield child
