"""
Test doubles shared across the unit tests.
"""

from core.schemas import TimeSeriesEntry


class FakeClock:
    """Manually advanced monotonic clock for expiry tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstreamClient:
    """Stands in for TimeSeriesAPIClient; counts fetch_catalog calls"""

    def __init__(self, catalog=None, error: Exception = None):
        self.catalog = catalog or []
        self.error = error
        self.calls = 0

    async def fetch_catalog(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.catalog


def make_entry(time: str, price: float = 150.0) -> TimeSeriesEntry:
    return TimeSeriesEntry(time=time, open=price, high=price + 1, low=price - 1, close=price)
