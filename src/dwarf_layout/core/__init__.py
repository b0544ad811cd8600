"""Core DWARF traversal: section loading, DIE cursors and context entries."""

from .context_entry import ContextEntry
from .entries_cursor import EntriesCursor, EntryChildrenIterator
from .exceptions import (
    EndianMismatchError,
    LayoutInspectorError,
    MalformedAttributeError,
    MalformedReferenceError,
    MissingEntryError,
    NoHomeDirectoryError,
    UnresolvedReferenceError,
)
from .models import DWAttribute, DWTag
from .section_loader import SectionLoader
from .unit_index import UnitIndex

__all__ = [
    "ContextEntry",
    "DWAttribute",
    "DWTag",
    "EndianMismatchError",
    "EntriesCursor",
    "EntryChildrenIterator",
    "LayoutInspectorError",
    "MalformedAttributeError",
    "MalformedReferenceError",
    "MissingEntryError",
    "NoHomeDirectoryError",
    "SectionLoader",
    "UnitIndex",
    "UnresolvedReferenceError",
]
