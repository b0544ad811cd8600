#!/usr/bin/env python3

"""Layout information models for printed classes."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldLayout:
    """One laid-out member or base class."""

    type_name: str
    name: str
    size: int
    start: int

    @property
    def end(self) -> int:
        """Offset one past the last byte of the field."""
        return self.start + self.size


@dataclass
class ClassLayout:
    """Information about a class and its fields in document order."""

    name: str
    byte_size: int
    fields: list[FieldLayout] = field(default_factory=list)
    die_offset: int | None = None
