#!/usr/bin/env python3

"""Enumeration of candidate classes across all compilation units."""

from collections.abc import Iterable, Iterator

from ...core import ContextEntry, DWAttribute, DWTag, UnitIndex
from ...infrastructure.logging import ProgressTracker, get_logger
from .search_filter import SearchFilter

logger = get_logger(__name__)

CLASS_TAGS = frozenset({DWTag.CLASS_TYPE.value})
STRUCT_TAGS = frozenset({DWTag.STRUCTURE_TYPE.value, DWTag.UNION_TYPE.value})


class ClassEnumerator:
    """Walks every unit's top-level DIEs and yields sized class candidates.

    Only ``class_type`` DIEs are candidates by default; ``include_structs``
    widens that to structures and unions. With ``recurse_namespaces`` the walk
    also descends into namespace DIEs.
    """

    def __init__(
        self,
        index: UnitIndex,
        include_structs: bool = False,
        recurse_namespaces: bool = False,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self.index = index
        self.candidate_tags = CLASS_TAGS | STRUCT_TAGS if include_structs else CLASS_TAGS
        self.recurse_namespaces = recurse_namespaces
        self.tracker = tracker or ProgressTracker(logger)

    def iter_candidates(self) -> Iterator[ContextEntry]:
        """Yield sized candidates in unit order, then document order."""
        for unit in self.index:
            with self.tracker.track_cu(unit):
                yield from self._iter_scope(ContextEntry.root(unit, self.index))

    def iter_matching(self, search_filter: SearchFilter) -> Iterator[ContextEntry]:
        """Yield the candidates passing ``search_filter``, deduplicated by name."""
        matching = (entry for entry in self.iter_candidates() if search_filter.matches(entry))
        return deduplicate_by_name(matching)

    def _iter_scope(self, scope: ContextEntry) -> Iterator[ContextEntry]:
        for entry in scope.iter_children():
            if self.recurse_namespaces and entry.tag == DWTag.NAMESPACE.value:
                yield from self._iter_scope(entry)
            elif entry.tag in self.candidate_tags and entry.has_attribute(DWAttribute.BYTE_SIZE):
                self.tracker.count_candidate()
                yield entry


def deduplicate_by_name(entries: Iterable[ContextEntry]) -> Iterator[ContextEntry]:
    """
    Drop entries whose name was already seen.

    The first occurrence wins. Unnamed entries cannot collide and are always
    kept.

    Args:
        entries: Entries in iteration order

    Yields:
        Entries with distinct names
    """
    seen: set[str] = set()
    for entry in entries:
        name = entry.name()
        if name is not None:
            if name in seen:
                logger.debug(f"Skipping duplicate class '{name}' at 0x{entry.offset:x}")
                continue
            seen.add(name)
        yield entry
