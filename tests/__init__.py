"""Test suite for the DWARF layout inspector.

Test Structure:
- core/: cursor, unit index, context entries and section loading
- domain/: filtering, enumeration and layout printing
- utils/: member location decoding
- application/: the inspection orchestrator
- config/: configuration management
- infrastructure/: logging setup and helpers
- test_main.py: command line end to end on synthetic images

Run tests with pytest:
    pytest                    # Run all tests
    pytest -m unit            # Run unit tests only
    pytest -m integration     # Run pipeline tests only
"""
