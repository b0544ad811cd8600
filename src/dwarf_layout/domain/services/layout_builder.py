#!/usr/bin/env python3

"""Builds ClassLayout objects from class entries."""

from ...core import ContextEntry, DWTag
from ...core.models import LAID_OUT_TAGS
from ...infrastructure.logging import get_logger
from ..models import ClassLayout, FieldLayout

logger = get_logger(__name__)

UNKNOWN_CLASS = "unknown_class"
UNKNOWN_NAME = "unknown_name"
BASE_CLASS_FIELD_NAME = "_base_class"


def build_field_layout(child: ContextEntry, start: int) -> FieldLayout:
    """
    Describe one member or inheritance child.

    Args:
        child: DW_TAG_member or DW_TAG_inheritance entry
        start: Its constant data_member_location

    Returns:
        FieldLayout with the typedef-expanded type name and size
    """
    field_type = child.class_()
    if field_type is not None:
        field_type = field_type.expand_typedefs()

    type_name = field_type.name() if field_type is not None else None
    size = field_type.size_bytes() if field_type is not None else None

    if child.tag == DWTag.INHERITANCE.value:
        name = BASE_CLASS_FIELD_NAME
    else:
        name = child.name() or UNKNOWN_NAME

    return FieldLayout(
        type_name=type_name or UNKNOWN_CLASS,
        name=name,
        size=size or 0,
        start=start,
    )


def build_class_layout(entry: ContextEntry) -> ClassLayout:
    """
    Describe a sized class and its laid-out fields in document order.

    Members without a constant location (static members, virtual bases)
    are left out.

    Args:
        entry: Class entry carrying DW_AT_byte_size

    Returns:
        ClassLayout for printing
    """
    byte_size = entry.size_bytes()
    assert byte_size is not None, f"class at 0x{entry.offset:x} has no byte size"

    layout = ClassLayout(
        name=entry.name() or UNKNOWN_CLASS,
        byte_size=byte_size,
        die_offset=entry.offset,
    )

    for child in entry.iter_children():
        if child.tag not in LAID_OUT_TAGS:
            continue
        start = child.member_location()
        if start is None:
            logger.debug(f"Skipping {child.tag} without constant location at 0x{child.offset:x}")
            continue

        field_layout = build_field_layout(child, start)
        if field_layout.end > layout.byte_size:
            logger.debug(
                f"Field {field_layout.name} of {layout.name} ends at {field_layout.end}, "
                f"past the class size {layout.byte_size}"
            )
        layout.fields.append(field_layout)

    return layout
