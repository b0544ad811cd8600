#!/usr/bin/env python3

"""Unit tests for DW_AT_data_member_location decoding.

Covers both the DWARF 3+ constant form and the DWARF 2 location expression
form, plus the locations that are not constants at all.
"""

import pytest
from elftools.dwarf.structs import DWARFStructs

from dwarf_layout.utils import parse_location_offset


@pytest.fixture
def structs() -> DWARFStructs:
    return DWARFStructs(little_endian=True, dwarf_format=32, address_size=8)


class TestParseLocationOffsetConstants:
    """Plain constant offsets (DWARF 3 and later)."""

    @pytest.mark.unit
    @pytest.mark.parametrize("form", ["DW_FORM_data1", "DW_FORM_data2", "DW_FORM_udata", "DW_FORM_implicit_const"])
    def test_constant_forms(self, structs: DWARFStructs, form: str) -> None:
        assert parse_location_offset(form, 0, structs) == 0
        assert parse_location_offset(form, 24, structs) == 24

    @pytest.mark.unit
    def test_large_offset(self, structs: DWARFStructs) -> None:
        assert parse_location_offset("DW_FORM_data4", 0x10000, structs) == 0x10000


class TestParseLocationOffsetExpressions:
    """Location expressions (DWARF 2)."""

    @pytest.mark.unit
    def test_plus_uconst(self, structs: DWARFStructs) -> None:
        assert parse_location_offset("DW_FORM_block1", [0x23, 0x00], structs) == 0
        assert parse_location_offset("DW_FORM_block1", [0x23, 0x08], structs) == 8

    @pytest.mark.unit
    def test_plus_uconst_multibyte_uleb(self, structs: DWARFStructs) -> None:
        # 0x90 0x01 is ULEB128 for 144
        assert parse_location_offset("DW_FORM_block1", [0x23, 0x90, 0x01], structs) == 144

    @pytest.mark.unit
    def test_tuple_and_bytes_expressions(self, structs: DWARFStructs) -> None:
        assert parse_location_offset("DW_FORM_block1", (0x23, 0x04), structs) == 4
        assert parse_location_offset("DW_FORM_exprloc", b"\x23\x0c", structs) == 12

    @pytest.mark.unit
    def test_virtual_base_expression_is_not_constant(self, structs: DWARFStructs) -> None:
        # dup; deref; const1u 0x18; minus; deref; plus
        expression = [0x12, 0x06, 0x08, 0x18, 0x1C, 0x06, 0x22]
        assert parse_location_offset("DW_FORM_block1", expression, structs) is None

    @pytest.mark.unit
    def test_empty_expression(self, structs: DWARFStructs) -> None:
        assert parse_location_offset("DW_FORM_block1", [], structs) is None


class TestParseLocationOffsetEdgeCases:
    """Values that carry no constant offset."""

    @pytest.mark.unit
    @pytest.mark.parametrize("form", ["DW_FORM_sec_offset", "DW_FORM_loclistx"])
    def test_location_lists(self, structs: DWARFStructs, form: str) -> None:
        assert parse_location_offset(form, 0x40, structs) is None

    @pytest.mark.unit
    def test_unknown_value_type(self, structs: DWARFStructs, caplog) -> None:
        assert parse_location_offset("DW_FORM_string", "4", structs) is None
        assert "Unknown member location value type" in caplog.text
