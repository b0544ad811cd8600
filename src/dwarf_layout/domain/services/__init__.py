#!/usr/bin/env python3

"""Class selection and layout rendering services."""

from .class_enumerator import ClassEnumerator, deduplicate_by_name
from .layout_builder import build_class_layout, build_field_layout
from .layout_printer import LayoutPrinter, format_class
from .search_filter import SearchFilter

__all__ = [
    "ClassEnumerator",
    "LayoutPrinter",
    "SearchFilter",
    "build_class_layout",
    "build_field_layout",
    "deduplicate_by_name",
    "format_class",
]
