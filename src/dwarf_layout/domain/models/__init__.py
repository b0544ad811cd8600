#!/usr/bin/env python3

"""Layout domain models."""

from .layout_info import ClassLayout, FieldLayout

__all__ = [
    "ClassLayout",
    "FieldLayout",
]
