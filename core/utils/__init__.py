"""
Core Utilities Package

This package contains utility functions and helpers used throughout the application.

Modules:
    - time: Timestamp parsing and UTC normalization
"""

from core.utils.time import to_utc_datetime

__all__ = ["to_utc_datetime"]
