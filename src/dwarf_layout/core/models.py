"""DWARF constants used while walking the DIE tree."""

from enum import Enum


class DWTag(Enum):
    """DWARF tags the layout inspector cares about."""

    COMPILE_UNIT = "DW_TAG_compile_unit"
    NAMESPACE = "DW_TAG_namespace"
    CLASS_TYPE = "DW_TAG_class_type"
    STRUCTURE_TYPE = "DW_TAG_structure_type"
    UNION_TYPE = "DW_TAG_union_type"
    ENUMERATION_TYPE = "DW_TAG_enumeration_type"
    BASE_TYPE = "DW_TAG_base_type"
    POINTER_TYPE = "DW_TAG_pointer_type"
    TYPEDEF = "DW_TAG_typedef"
    MEMBER = "DW_TAG_member"
    INHERITANCE = "DW_TAG_inheritance"


class DWAttribute(Enum):
    """DWARF attribute names read by the inspector."""

    NAME = "DW_AT_name"
    BYTE_SIZE = "DW_AT_byte_size"
    DATA_MEMBER_LOCATION = "DW_AT_data_member_location"
    TYPE = "DW_AT_type"
    SIBLING = "DW_AT_sibling"


# Aggregates that own member/inheritance children
AGGREGATE_TAGS = frozenset(
    {
        DWTag.CLASS_TYPE.value,
        DWTag.STRUCTURE_TYPE.value,
        DWTag.UNION_TYPE.value,
    }
)

# Children that occupy storage inside an aggregate
LAID_OUT_TAGS = frozenset(
    {
        DWTag.MEMBER.value,
        DWTag.INHERITANCE.value,
    }
)

# Reference forms whose value is relative to the owning CU header
CU_RELATIVE_REFERENCE_FORMS = frozenset(
    {
        "DW_FORM_ref1",
        "DW_FORM_ref2",
        "DW_FORM_ref4",
        "DW_FORM_ref8",
        "DW_FORM_ref_udata",
    }
)

# Reference forms whose value is an offset into .debug_info
DEBUG_INFO_REFERENCE_FORMS = frozenset({"DW_FORM_ref_addr"})
