"""
Shared test setup.

PORT is required by core.config at import time, so it is provided here
before any test module imports the application.
"""

import os

os.environ.setdefault("PORT", "8080")

import pytest  # noqa: E402

from core.schemas import TimeSeriesSeries  # noqa: E402
from tests.helpers import FakeClock, make_entry  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def aapl_series():
    return TimeSeriesSeries(
        symbol="AAPL",
        period="1min",
        data=[
            make_entry("2024-05-14T09:59:00Z", 149.0),
            make_entry("2024-05-14T10:00:00Z", 150.0),
            make_entry("2024-05-14T10:03:00Z", 151.0),
            make_entry("2024-05-14T10:05:00Z", 152.0),
            make_entry("2024-05-14T10:06:00Z", 153.0),
        ]
    )


@pytest.fixture
def msft_series():
    return TimeSeriesSeries(
        symbol="MSFT",
        period="5min",
        data=[make_entry("2024-05-14T10:00:00Z", 410.0)]
    )
