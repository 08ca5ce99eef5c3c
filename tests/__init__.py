"""
Scrum Work Map Test Suite

This package contains unit tests, integration tests, and fixtures
for the Scrum Work Map engine.

Run tests with:
    pytest tests/
    pytest tests/test_layout.py -v
    pytest tests/test_continuity.py::TestAnalyzeWeeks -v
"""
