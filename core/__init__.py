"""
Core Package

Contains the application-wide building blocks:
- config: Pydantic Settings loaded from the environment (.env)
- logging: Central logger setup
- errors: Errors reported to HTTP clients
- schemas: Pydantic models for time-series data and response envelopes
- utils: Timestamp normalization helpers
"""
