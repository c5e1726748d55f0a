"""
Test Suite

Contains unit tests for the backend.

Structure:
- tests/unit/: Tests for individual components (cache, service, client, API)
- tests/helpers.py: Fake clock and fake upstream client shared by the tests

Uses pytest with pytest-asyncio for testing async functionality.
"""
