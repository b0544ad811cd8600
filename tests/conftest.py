"""Pytest configuration and shared fixtures."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dwarf_layout.infrastructure.logging import LoggerSetup
from tests.dwarf_fixtures import (
    FakeDwarfInfo,
    Ref,
    base_type,
    build_image,
    class_type,
    inheritance,
    member,
    pointer,
    typedef,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Give every test an unconfigured logging system."""
    LoggerSetup.reset()
    yield
    LoggerSetup.reset()


@pytest.fixture
def point_image() -> FakeDwarfInfo:
    """Single unit holding ``Point { int x; int y; }``."""
    return build_image(
        [
            base_type("int", 4),
            class_type(
                "Point",
                8,
                member("x", Ref("int"), 0),
                member("y", Ref("int"), 4),
            ),
        ]
    )


@pytest.fixture
def hierarchy_image() -> FakeDwarfInfo:
    """Base/Derived pair, a self-referencing Node and a typedef chain."""
    return build_image(
        [
            base_type("int", 4),
            base_type("uint32_t", 4),
            typedef("u32", Ref("uint32_t")),
            typedef("DWORD", Ref("u32")),
            typedef("ULONG", Ref("DWORD")),
            class_type("Base", 8, member("id", Ref("int"), 0)),
            class_type(
                "Derived",
                16,
                inheritance(Ref("Base"), 0),
                member("z", Ref("int"), 8),
            ),
            class_type("Node", 8, member("next", Ref("node_ptr"), 0)),
            pointer(Ref("Node"), label="node_ptr"),
            class_type("Foo", 4, member("value", Ref("ULONG"), 0)),
        ]
    )
