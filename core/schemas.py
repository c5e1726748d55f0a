"""
Time-Series Data Schemas

This module defines Pydantic models for the time-series data this backend
caches and serves, plus the JSON envelopes of the HTTP API.

Key Principle:
    Upstream payloads are validated here, at the boundary, before anything is
    written to the cache. The cache only ever holds TimeSeriesEntry objects.

Models:
    - TimeSeriesEntry: One OHLC point (time, open, high, low, close)
    - TimeSeriesSeries: Full series for one symbol/period pair
    - HealthResponse: Body of GET /
    - TimeseriesSuccessResponse: Body of a successful GET /api
    - ErrorResponse: Body of every error response
"""

from datetime import datetime
from typing import Any, List, Literal, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    field_validator,
)

from core.utils.time import to_utc_datetime


# ============================================
# Time-Series Entry Schema
# ============================================

# Timestamps and prices are kept exactly as the upstream sent them
Timestamp = Union[StrictStr, StrictInt, StrictFloat, datetime]
Price = Union[StrictInt, float]


class TimeSeriesEntry(BaseModel):
    """
    A single Open-High-Low-Close data point.

    Immutable once created: entries are shared between the cache and every
    response built from it, and serialize back to exactly what the upstream
    sent (original `time` text, integer prices stay integers, extra fields kept).

    Attributes:
        time: Point timestamp as received (ISO 8601 string or epoch number)
        open: Opening price
        high: Highest price
        low: Lowest price
        close: Closing price
        instant: `time` parsed to an aware UTC datetime, used for range filtering

    Example:
        >>> entry = TimeSeriesEntry(
        ...     time="2024-05-14T12:00:00+02:00",
        ...     open=150,
        ...     high=151,
        ...     low=149,
        ...     close=150
        ... )
        >>> entry.time
        '2024-05-14T12:00:00+02:00'
        >>> entry.instant
        datetime.datetime(2024, 5, 14, 10, 0, tzinfo=datetime.timezone.utc)
    """

    time: Timestamp = Field(
        ...,
        description="Timestamp of the data point as sent by the upstream"
    )

    open: Price = Field(..., description="Opening price")
    high: Price = Field(..., description="Highest price")
    low: Price = Field(..., description="Lowest price")
    close: Price = Field(..., description="Closing price")

    _instant: datetime = PrivateAttr()

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        """Reject timestamps that do not name an instant; keep the value untouched"""
        to_utc_datetime(v)
        return v

    def model_post_init(self, __context: Any) -> None:
        self._instant = to_utc_datetime(self.time)

    @property
    def instant(self) -> datetime:
        return self._instant

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        json_schema_extra={
            "example": {
                "time": "2024-05-14T10:00:00Z",
                "open": 150,
                "high": 151,
                "low": 149,
                "close": 150
            }
        }
    )


# ============================================
# Time-Series Series Schema
# ============================================

class TimeSeriesSeries(BaseModel):
    """
    The complete known series for one symbol/period pair.

    This is the unit the upstream API returns (as a list of them) and the
    unit the cache stores (one key per symbol/period).

    Attributes:
        symbol: Asset symbol (e.g., "AAPL"), kept exactly as the upstream sends it
        period: Sampling period (e.g., "1min")
        data: Entries in upstream order (chronological by convention, not enforced)
    """

    symbol: str = Field(..., examples=["AAPL", "MSFT"])
    period: str = Field(..., examples=["1min", "5min", "1day"])
    data: List[TimeSeriesEntry] = Field(default_factory=list)


# Validates the whole upstream response body in one pass
SeriesCatalog = TypeAdapter(List[TimeSeriesSeries])


# ============================================
# HTTP Response Envelopes
# ============================================

class HealthResponse(BaseModel):
    """Body of the health route"""

    status: Literal[True] = True
    message: str = Field(..., examples=["Backend cache server is up and running!"])
    uptime: int = Field(..., ge=0, description="Process uptime in seconds")


class TimeseriesSuccessResponse(BaseModel):
    """Body of a successful time-series lookup"""

    status: Literal[True] = True
    data: List[TimeSeriesEntry]


class ErrorResponse(BaseModel):
    """Body of every error response"""

    status: Literal[False] = False
    message: str
