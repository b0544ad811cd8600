"""Core DWARF navigation tests."""
