#!/usr/bin/env python3

"""Constant extraction from DW_AT_data_member_location.

DWARF 3 and later producers store a member's offset as a plain constant.
DWARF 2 producers store it as a location expression, almost always the
single operation ``DW_OP_plus_uconst <offset>``. Anything richer (virtual
base offsets computed through the vtable, location lists) is not a constant
and yields None.

Example:
    DWARF 4: member_location = 4              -> 4
    DWARF 2: member_location = [0x23, 0x04]   -> 4
    virtual base: [0x12, 0x06, 0x08, 0x18, 0x1c, 0x06, 0x22] -> None
"""

from elftools.dwarf.dwarf_expr import DWARFExprParser
from elftools.dwarf.structs import DWARFStructs

from ..infrastructure.logging import get_logger

logger = get_logger(__name__)

CONSTANT_OPERATIONS = frozenset({"DW_OP_plus_uconst"})

# Forms holding a reference into a location list rather than an offset
LOCATION_LIST_FORMS = frozenset({"DW_FORM_sec_offset", "DW_FORM_loclistx"})


def _parse_location_expression(expression: list[int], structs: DWARFStructs) -> int | None:
    """Evaluate a location expression made of a single constant operation."""
    if not expression:
        logger.debug("Empty location expression, cannot extract offset")
        return None

    operations = DWARFExprParser(structs).parse_expr(expression)
    if len(operations) == 1 and operations[0].op_name in CONSTANT_OPERATIONS:
        offset = operations[0].args[0]
        logger.debug(f"Parsed {operations[0].op_name} location expression: offset={offset}")
        return offset

    logger.debug(
        "Non-constant location expression: "
        + " ".join(operation.op_name for operation in operations)
    )
    return None


def parse_location_offset(form: str, value: object, structs: DWARFStructs) -> int | None:
    """Extract a member offset from a DW_AT_data_member_location attribute.

    Args:
        form: DW_FORM_* name of the attribute
        value: Attribute value as decoded by pyelftools
        structs: DWARFStructs of the owning CU, used to decode expressions

    Returns:
        Offset in bytes, or None when the location is not a constant

    Examples:
        >>> parse_location_offset("DW_FORM_data1", 4, structs)
        4

        >>> parse_location_offset("DW_FORM_block1", [0x23, 0x10], structs)
        16
    """
    if form in LOCATION_LIST_FORMS:
        logger.debug(f"Member location is a location list ({form}), skipping")
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, (list, tuple, bytes)):
        return _parse_location_expression(list(value), structs)

    logger.warning(f"Unknown member location value type: {type(value).__name__}")
    return None
