"""Application layer tests."""
