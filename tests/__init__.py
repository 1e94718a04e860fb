#!/usr/bin/env python3
"""
Test suite configuration.

    # Run all tests
    python -m pytest tests/ -v

    # Skip tests that open a database session (SQLite in-memory)
    python -m pytest tests/ -v -m "not db"
"""
