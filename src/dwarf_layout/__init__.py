"""DWARF layout inspector - prints C++ class layouts from DWARF debug information."""

from .application import LayoutInspector
from .domain.services import SearchFilter
from .infrastructure.config import Config
from .main import main

__all__ = ["Config", "LayoutInspector", "SearchFilter", "main"]
