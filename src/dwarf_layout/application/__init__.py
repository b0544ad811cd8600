"""Application layer orchestrating a complete inspection run."""

from .layout_inspector import LayoutInspector

__all__ = ["LayoutInspector"]
