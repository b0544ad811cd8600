"""Utilities module initialization."""

from .dwarf_location_parser import parse_location_offset

__all__ = [
    "parse_location_offset",
]
