"""Fatal error types raised while inspecting a binary."""

from pathlib import Path


class LayoutInspectorError(Exception):
    """Base class for errors that abort an inspection run."""


class NoHomeDirectoryError(LayoutInspectorError):
    """No shared object path was given and $HOME is not set."""

    def __init__(self) -> None:
        super().__init__("Could not find home directory from $HOME env var")


class EndianMismatchError(LayoutInspectorError):
    """The debug-link companion does not share the main object's endianness."""

    def __init__(self, main_path: Path, companion_path: Path) -> None:
        super().__init__(
            f"Endianness of debug companion {companion_path} does not match {main_path}"
        )
        self.main_path = main_path
        self.companion_path = companion_path


class MalformedReferenceError(LayoutInspectorError):
    """A DW_AT_type attribute uses a form that is not a DIE reference."""

    def __init__(self, die_offset: int, form: str) -> None:
        super().__init__(
            f"Invalid form {form} for DW_AT_type at DIE 0x{die_offset:x}, "
            "must be a reference into the debug info section"
        )
        self.die_offset = die_offset
        self.form = form


class UnresolvedReferenceError(LayoutInspectorError):
    """A .debug_info offset does not fall inside any compilation unit."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"No compilation unit owns .debug_info offset 0x{offset:x}")
        self.offset = offset


class MalformedAttributeError(LayoutInspectorError):
    """An attribute carries a value that cannot be interpreted."""

    def __init__(self, die_offset: int, attribute: str, value: object) -> None:
        super().__init__(
            f"Invalid value {value!r} for {attribute} at DIE 0x{die_offset:x}"
        )
        self.die_offset = die_offset
        self.attribute = attribute


class MissingEntryError(LayoutInspectorError):
    """No DIE can be read at an offset that should start one."""

    def __init__(self, die_offset: int, unit_offset: int) -> None:
        super().__init__(
            f"No DIE at .debug_info offset 0x{die_offset:x} in CU 0x{unit_offset:x}"
        )
        self.die_offset = die_offset
        self.unit_offset = unit_offset
