"""Tests for DWARF section loading and debug-link companions."""

import logging
import struct
import zlib
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from elftools.elf.elffile import ELFFile

from dwarf_layout.core import EndianMismatchError, SectionLoader
from dwarf_layout.core.section_loader import (
    DebugLinkedELFFile,
    file_crc32,
    parse_debuglink,
)

LOADER_MODULE = "dwarf_layout.core.section_loader"


def _debuglink(name: str, crc: int, little_endian: bool = True) -> bytes:
    payload = name.encode() + b"\0"
    payload += b"\0" * (-len(payload) % 4)
    return payload + struct.pack("<I" if little_endian else ">I", crc)


def _section(sh_type: str = "SHT_PROGBITS", data: bytes = b"") -> MagicMock:
    section = MagicMock()
    section.__getitem__.side_effect = {"sh_type": sh_type}.__getitem__
    section.data.return_value = data
    return section


def _elf(little_endian: bool = True, sections: dict | None = None) -> Mock:
    elf = Mock()
    elf.little_endian = little_endian
    elf.get_machine_arch.return_value = "x64"
    elf.get_section_by_name.side_effect = (sections or {}).get
    return elf


class TestParseDebuglink:
    """Decoding of .gnu_debuglink contents."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["a.debug", "libcoreclr.so.dbg", "libx.dbg", "abcdefghijk"])
    def test_name_and_crc(self, name: str) -> None:
        assert parse_debuglink(_debuglink(name, 0xDEADBEEF), True) == (name, 0xDEADBEEF)

    @pytest.mark.unit
    def test_big_endian_crc(self) -> None:
        data = _debuglink("lib.debug", 0x01020304, little_endian=False)
        assert parse_debuglink(data, False) == ("lib.debug", 0x01020304)

    @pytest.mark.unit
    @pytest.mark.parametrize("data", [b"", b"\0\0\0\0\0\0\0\0", b"no-terminator", b"short\0\0\0\1"])
    def test_malformed_sections(self, data: bytes) -> None:
        assert parse_debuglink(data, True) is None

    @pytest.mark.unit
    def test_file_crc32(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.debug"
        content = bytes(range(256)) * 100
        path.write_bytes(content)
        assert file_crc32(path) == zlib.crc32(content)


class TestDebugLinkedELFFile:
    """Section lookup falling back to the companion object."""

    @pytest.fixture
    def companion(self) -> Mock:
        return _elf(sections={".debug_info": _section(), ".debug_str": _section()})

    def _linked(self, companion: Mock) -> DebugLinkedELFFile:
        elf = DebugLinkedELFFile.__new__(DebugLinkedELFFile)
        elf.companion = companion
        return elf

    @pytest.mark.unit
    def test_nobits_section_served_by_companion(self, companion: Mock) -> None:
        elf = self._linked(companion)
        with patch.object(ELFFile, "get_section_by_name", return_value=_section("SHT_NOBITS")):
            assert elf.get_section_by_name(".debug_info") is companion.get_section_by_name(".debug_info")

    @pytest.mark.unit
    def test_missing_section_served_by_companion(self, companion: Mock) -> None:
        elf = self._linked(companion)
        with patch.object(ELFFile, "get_section_by_name", return_value=None):
            assert elf.get_section_by_name(".debug_str") is companion.get_section_by_name(".debug_str")

    @pytest.mark.unit
    def test_main_section_wins(self, companion: Mock) -> None:
        main_section = _section()
        elf = self._linked(companion)
        with patch.object(ELFFile, "get_section_by_name", return_value=main_section):
            assert elf.get_section_by_name(".debug_info") is main_section

    @pytest.mark.unit
    def test_non_dwarf_sections_never_fall_back(self, companion: Mock) -> None:
        elf = self._linked(companion)
        with patch.object(ELFFile, "get_section_by_name", return_value=None):
            assert elf.get_section_by_name(".text") is None
        companion.get_section_by_name.assert_not_called()

    @pytest.mark.unit
    def test_absent_everywhere(self, companion: Mock) -> None:
        elf = self._linked(companion)
        with patch.object(ELFFile, "get_section_by_name", return_value=None):
            assert elf.get_section_by_name(".debug_ranges") is None

    @pytest.mark.unit
    def test_companion_section_read_by_companion(self, companion: Mock) -> None:
        elf = self._linked(companion)
        section = _section()
        section.elffile = companion

        result = elf._read_dwarf_section(section, True)

        companion._read_dwarf_section.assert_called_once_with(section, True)
        assert result is companion._read_dwarf_section.return_value


class TestSectionLoader:
    """Opening objects and loading DWARF info."""

    @pytest.fixture
    def shared_object(self, tmp_path: Path) -> Path:
        path = tmp_path / "libgame.so"
        path.write_bytes(b"\x7fELF")
        return path

    @pytest.mark.unit
    def test_open_without_debuglink(self, shared_object: Path) -> None:
        with patch(f"{LOADER_MODULE}.ELFFile", return_value=_elf()), patch(
            f"{LOADER_MODULE}.DebugLinkedELFFile"
        ) as linked:
            with SectionLoader(shared_object) as loader:
                assert loader.companion_path is None
                assert loader.elf_file is linked.return_value
                assert linked.call_args.args[1] is None
            assert loader.elf_file is None

    @pytest.mark.unit
    def test_open_with_companion(self, shared_object: Path) -> None:
        companion_path = shared_object.parent / "libgame.so.dbg"
        companion_path.write_bytes(b"debug bytes")
        link = _debuglink(companion_path.name, zlib.crc32(b"debug bytes"))
        main_elf = _elf(sections={".gnu_debuglink": _section(data=link)})
        companion_elf = _elf()

        with patch(f"{LOADER_MODULE}.ELFFile", side_effect=[main_elf, companion_elf]), patch(
            f"{LOADER_MODULE}.DebugLinkedELFFile"
        ) as linked:
            with SectionLoader(shared_object) as loader:
                assert loader.companion_path == companion_path
                assert linked.call_args.args[1] is companion_elf
                assert len(loader._handles) == 2
            assert loader._handles == []

    @pytest.mark.unit
    def test_missing_companion_is_skipped(self, shared_object: Path) -> None:
        link = _debuglink("gone.debug", 0)
        main_elf = _elf(sections={".gnu_debuglink": _section(data=link)})

        with patch(f"{LOADER_MODULE}.ELFFile", return_value=main_elf), patch(
            f"{LOADER_MODULE}.DebugLinkedELFFile"
        ) as linked:
            with SectionLoader(shared_object) as loader:
                assert loader.companion_path is None
                assert linked.call_args.args[1] is None

    @pytest.mark.unit
    def test_crc_mismatch_only_warns(self, shared_object: Path, caplog) -> None:
        companion_path = shared_object.parent / "libgame.so.dbg"
        companion_path.write_bytes(b"other bytes")
        link = _debuglink(companion_path.name, 0x12345678)
        main_elf = _elf(sections={".gnu_debuglink": _section(data=link)})

        with patch(f"{LOADER_MODULE}.ELFFile", side_effect=[main_elf, _elf()]), patch(
            f"{LOADER_MODULE}.DebugLinkedELFFile"
        ):
            with caplog.at_level(logging.WARNING, logger=LOADER_MODULE):
                with SectionLoader(shared_object) as loader:
                    assert loader.companion_path == companion_path

        assert "CRC mismatch" in caplog.text

    @pytest.mark.unit
    def test_endian_mismatch_is_fatal(self, shared_object: Path) -> None:
        companion_path = shared_object.parent / "libgame.so.dbg"
        companion_path.write_bytes(b"debug bytes")
        link = _debuglink(companion_path.name, 0)
        main_elf = _elf(sections={".gnu_debuglink": _section(data=link)})

        loader = SectionLoader(shared_object)
        with patch(f"{LOADER_MODULE}.ELFFile", side_effect=[main_elf, _elf(little_endian=False)]):
            with pytest.raises(EndianMismatchError) as exc_info:
                with loader:
                    pass

        assert exc_info.value.companion_path == companion_path
        assert loader._handles == []

    @pytest.mark.unit
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            with SectionLoader(tmp_path / "absent.so"):
                pass

    @pytest.mark.unit
    def test_load_requires_open(self, shared_object: Path) -> None:
        with pytest.raises(RuntimeError, match="open"):
            SectionLoader(shared_object).load_dwarf_info()

    @pytest.mark.unit
    def test_load_without_debug_info(self, shared_object: Path, caplog) -> None:
        loader = SectionLoader(shared_object)
        loader.elf_file = _elf(sections={".debug_info": _section("SHT_NOBITS")})

        with caplog.at_level(logging.WARNING, logger=LOADER_MODULE):
            assert loader.load_dwarf_info() is None
        assert "No DWARF debug information" in caplog.text

    @pytest.mark.unit
    @pytest.mark.parametrize("section_name", [".debug_info", ".zdebug_info"])
    def test_load_with_debug_info(self, shared_object: Path, section_name: str) -> None:
        loader = SectionLoader(shared_object)
        loader.elf_file = _elf(sections={section_name: _section()})

        dwarf_info = loader.load_dwarf_info()

        assert dwarf_info is loader.elf_file.get_dwarf_info.return_value
