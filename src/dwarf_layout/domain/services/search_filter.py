#!/usr/bin/env python3

"""User predicate deciding which classes get printed."""

from dataclasses import dataclass
from typing import Optional

from ...core import ContextEntry
from ...infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchFilter:
    """Three-part class predicate.

    Each unset field accepts everything; a set field requires an exact,
    byte-for-byte name match. A class passes only if every part passes.
    """

    class_name: Optional[str] = None
    base_class_name: Optional[str] = None
    contained_class_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True when the filter accepts every class."""
        return (
            self.class_name is None
            and self.base_class_name is None
            and self.contained_class_name is None
        )

    def matches(self, entry: ContextEntry) -> bool:
        """
        Check a candidate class against every part of the filter.

        Args:
            entry: Sized class/struct entry

        Returns:
            True if the class should be printed
        """
        return (
            self.matches_class_name(entry)
            and self.matches_base_class(entry)
            and self.matches_contained_class(entry)
        )

    def matches_class_name(self, entry: ContextEntry) -> bool:
        if self.class_name is None:
            return True
        return entry.name() == self.class_name

    def matches_base_class(self, entry: ContextEntry) -> bool:
        """Only direct bases are considered."""
        if self.base_class_name is None:
            return True
        return any(base.name() == self.base_class_name for base in entry.iter_base_classes())

    def matches_contained_class(self, entry: ContextEntry) -> bool:
        """Match data members by their typedef-expanded type name."""
        if self.contained_class_name is None:
            return True

        for member in entry.iter_class_members():
            member_type = member.class_()
            if member_type is None:
                continue
            if member_type.expand_typedefs().name() == self.contained_class_name:
                logger.debug(
                    f"Member {member.name()} at 0x{member.offset:x} matches "
                    f"'{self.contained_class_name}'"
                )
                return True
        return False
