"""Loading of DWARF sections from a binary and its debug-link companion.

Stripped shared objects usually keep a ``.gnu_debuglink`` section naming a
separate file that holds the ``.debug_*`` sections. The loader opens both
objects and serves every DWARF section from the main object first, falling
back to the companion. Each section is read, decompressed and relocated by
the object that actually contains it, so pyelftools' relocation handling sees
the right relocation sections.
"""

import struct
import zlib
from pathlib import Path
from typing import Any, BinaryIO, Optional

from elftools.dwarf.dwarfinfo import DWARFInfo
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import Section

from ..infrastructure.logging import get_logger, log_timing
from .exceptions import EndianMismatchError

logger = get_logger(__name__)

DWARF_SECTION_PREFIXES = (".debug_", ".zdebug_")
DEBUG_LINK_SECTION = ".gnu_debuglink"


def _has_contents(section: Optional[Section]) -> bool:
    return section is not None and section["sh_type"] != "SHT_NOBITS"


def parse_debuglink(data: bytes, little_endian: bool) -> tuple[str, int] | None:
    """
    Decode the contents of a ``.gnu_debuglink`` section.

    The section holds a NUL-terminated file name, padding up to a 4-byte
    boundary and a 4-byte CRC32 of the companion file.

    Args:
        data: Raw section bytes
        little_endian: Byte order of the object holding the section

    Returns:
        Tuple of (file name, CRC32), or None if the section is malformed
    """
    end = data.find(b"\0")
    if end <= 0:
        return None

    name = data[:end].decode("utf-8", errors="replace")
    crc_offset = (end + 4) & ~3
    if len(data) < crc_offset + 4:
        return None

    (crc,) = struct.unpack_from("<I" if little_endian else ">I", data, crc_offset)
    return name, crc


def file_crc32(path: Path) -> int:
    """CRC32 of a whole file, as stored in .gnu_debuglink."""
    crc = 0
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            crc = zlib.crc32(chunk, crc)
    return crc


class DebugLinkedELFFile(ELFFile):
    """ELF file whose DWARF sections may live in a debug-link companion."""

    def __init__(self, stream: BinaryIO, companion: Optional[ELFFile] = None) -> None:
        self.companion = companion
        super().__init__(stream)

    def get_section_by_name(self, name: str) -> Any:
        section = super().get_section_by_name(name)
        if self.companion is None or not name.startswith(DWARF_SECTION_PREFIXES):
            return section
        if _has_contents(section):
            return section

        fallback = self.companion.get_section_by_name(name)
        if _has_contents(fallback):
            logger.debug(f"Section {name} served from debug companion")
            return fallback
        return section

    def _read_dwarf_section(self, section: Section, relocate_dwarf_sections: bool) -> Any:
        owner = section.elffile
        if owner is self:
            return super()._read_dwarf_section(section, relocate_dwarf_sections)
        return owner._read_dwarf_section(section, relocate_dwarf_sections)


class SectionLoader:
    """Opens a binary and its debug companion and produces a DWARFInfo.

    Use as a context manager; the underlying file handles stay open until
    exit so every DWARF structure read from them remains valid.
    """

    def __init__(self, shared_object_path: Path) -> None:
        """
        Initialize the loader.

        Args:
            shared_object_path: Path to the main binary
        """
        self.shared_object_path = shared_object_path
        self.elf_file: Optional[DebugLinkedELFFile] = None
        self.companion_path: Optional[Path] = None
        self._handles: list[BinaryIO] = []

    def open(self) -> None:
        """Open the main object and, if present, its debug-link companion."""
        main_handle = self._open_handle(self.shared_object_path)
        main_elf = ELFFile(main_handle)
        logger.debug(
            f"Opened {self.shared_object_path} ({main_elf.get_machine_arch()}, "
            f"{'little' if main_elf.little_endian else 'big'}-endian)"
        )

        companion = self._open_companion(main_elf)
        self.elf_file = DebugLinkedELFFile(main_handle, companion)

    @log_timing
    def load_dwarf_info(self) -> Optional[DWARFInfo]:
        """
        Load DWARF sections from the opened objects.

        Returns:
            DWARFInfo, or None when neither object carries .debug_info

        Raises:
            RuntimeError: If open() was not called
        """
        if self.elf_file is None:
            raise RuntimeError("Shared object not opened. Call open() first.")

        has_debug_info = any(
            _has_contents(self.elf_file.get_section_by_name(name))
            for name in (".debug_info", ".zdebug_info")
        )
        if not has_debug_info:
            logger.warning(f"No DWARF debug information found for {self.shared_object_path}")
            return None

        dwarf_info = self.elf_file.get_dwarf_info()
        logger.debug(
            f"Loaded DWARF info (address size {dwarf_info.config.default_address_size})"
        )
        return dwarf_info

    def close(self) -> None:
        """Close every file handle opened by the loader."""
        while self._handles:
            self._handles.pop().close()
        self.elf_file = None

    def _open_handle(self, path: Path) -> BinaryIO:
        handle = open(path, "rb")
        self._handles.append(handle)
        return handle

    def _open_companion(self, main_elf: ELFFile) -> Optional[ELFFile]:
        section = main_elf.get_section_by_name(DEBUG_LINK_SECTION)
        if section is None:
            return None

        link = parse_debuglink(section.data(), main_elf.little_endian)
        if link is None:
            logger.warning(f"Ignoring malformed {DEBUG_LINK_SECTION} in {self.shared_object_path}")
            return None

        name, expected_crc = link
        companion_path = self.shared_object_path.parent / name
        if not companion_path.exists():
            logger.debug(f"Debug companion {companion_path} not found, skipping")
            return None

        companion_handle = self._open_handle(companion_path)
        companion = ELFFile(companion_handle)
        if companion.little_endian != main_elf.little_endian:
            raise EndianMismatchError(self.shared_object_path, companion_path)

        actual_crc = file_crc32(companion_path)
        if actual_crc != expected_crc:
            logger.warning(
                f"CRC mismatch for debug companion {companion_path}: "
                f"expected 0x{expected_crc:08x}, got 0x{actual_crc:08x}"
            )

        self.companion_path = companion_path
        logger.info(f"Using debug companion {companion_path}")
        return companion

    def __enter__(self) -> "SectionLoader":
        """Context manager entry."""
        try:
            self.open()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
