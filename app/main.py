"""
FastAPI Application - Time-Series Cache Backend

Serves time-series (OHLC) ranges for a symbol/period pair, backed by an
in-memory TTL cache in front of the upstream time-series API.

Endpoints:
    - GET /      Health check (status, message, uptime)
    - GET /api   Time-series lookup: ?symbol=&period=&start=&end=

Every other path or method answers 404 `{status: false, message: "Route not found!"}`.

Usage:
    PORT=8080 python start.py
    PORT=8080 uvicorn app.main:app --port 8080

Docs:
    - Swagger: http://localhost:8080/docs
    - ReDoc: http://localhost:8080/redoc
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from app.lifecycle import install_fatal_handlers
from core.config import settings, validate_configuration
from core.errors import AppError, ValidationError
from core.logging import logger
from core.schemas import ErrorResponse, HealthResponse, TimeseriesSuccessResponse
from core.utils.time import to_utc_datetime
from services.timeseries_service import TimeSeriesService
from storage.cache import TTLCache
from upstream.api_client import TimeSeriesAPIClient

MISSING_PARAMS_MESSAGE = "Symbol, period, start, and end parameters are required"
INVALID_RANGE_MESSAGE = "Invalid start or end timestamp"
NOT_FOUND_MESSAGE = "Route not found!"

_process_started = time.monotonic()


# ============================================
# Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the cache, upstream client and service; tear them down on shutdown."""
    # Startup
    logger.info("=== Application Starting ===")
    validate_configuration()

    cache = TTLCache(
        default_ttl=settings.cache_ttl,
        check_period=settings.cache_check_period
    )
    client = TimeSeriesAPIClient(settings.upstream_url, timeout=settings.upstream_timeout)
    await client.open()

    app.state.cache = cache
    app.state.client = client
    app.state.service = TimeSeriesService(cache, client, ttl=settings.cache_ttl)

    restore_handlers = install_fatal_handlers(cache, asyncio.get_running_loop())
    await cache.start_sweeper()
    logger.info(f"Backend is running on http://localhost:{settings.port}")

    yield

    # Shutdown
    logger.info("=== Shutting Down ===")
    try:
        await cache.stop_sweeper()
        await client.close()
    except Exception as e:
        logger.error(f"Shutdown error: {e}")
    finally:
        logger.info(f"Cache stats at shutdown: {cache.stats()}")
        cache.clear()
        logger.info("Cache successfully flushed.")
        restore_handlers()
        logger.info("=== Shutdown Complete ===")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Time-Series Cache Backend",
    description=(
        "Caching proxy in front of an upstream time-series API.\n\n"
        "## REST Endpoints\n"
        "- `GET /` - Health check\n"
        "- `GET /api?symbol=AAPL&period=1min&start=...&end=...` - Entries in the inclusive range\n\n"
        "A cache miss fetches the full upstream catalog and caches every series in it."
    ),
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)


# ============================================
# Middleware
# ============================================

@app.middleware("http")
async def request_logger(request: Request, call_next):
    """Log method, URL, status and duration of every request."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info(f"[{request.method}] {url}")

    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started

    logger.info(f"[{request.method}] {url} -> {response.status_code} ({elapsed * 1000:.1f}ms)")
    return response


# ============================================
# Dependencies
# ============================================

def get_service(request: Request) -> TimeSeriesService:
    return request.app.state.service


# ============================================
# System Endpoints
# ============================================

@app.get("/", response_model=HealthResponse, tags=["System"])
async def root():
    """Health check - confirms the server is up and reports uptime."""
    logger.info("--- Inside '/' route | GET ---")
    return HealthResponse(
        message="Backend cache server is up and running!",
        uptime=int(time.monotonic() - _process_started)
    )


# ============================================
# Time-Series Endpoints
# ============================================

@app.get("/api", response_model=TimeseriesSuccessResponse, tags=["Time Series"])
async def get_timeseries(
    symbol: Optional[str] = Query(default=None, description="Asset symbol (e.g., AAPL)"),
    period: Optional[str] = Query(default=None, description="Sampling period (e.g., 1min)"),
    start: Optional[str] = Query(default=None, description="Inclusive range start (ISO 8601)"),
    end: Optional[str] = Query(default=None, description="Inclusive range end (ISO 8601)"),
    service: TimeSeriesService = Depends(get_service)
):
    """
    Get the entries of one series between `start` and `end`, both inclusive.

    Served from the cache when the series is present; otherwise the full
    upstream catalog is fetched and cached first.
    """
    if not symbol or not period or not start or not end:
        logger.warning("Missing required query parameters in get_timeseries")
        raise ValidationError(MISSING_PARAMS_MESSAGE)

    try:
        start_at = to_utc_datetime(start)
        end_at = to_utc_datetime(end)
    except ValueError as e:
        logger.warning(f"Unparseable range {start!r}..{end!r}: {e}")
        raise ValidationError(INVALID_RANGE_MESSAGE)

    logger.info(
        f"Received request for symbol: {symbol}, period: {period}, start: {start}, end: {end}"
    )
    data = await service.fetch_range(symbol, period, start_at, end_at)

    logger.info(f"Successfully retrieved {len(data)} entries for {symbol}-{period}")
    return TimeseriesSuccessResponse(data=data)


# ============================================
# Error Handlers
# ============================================

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump()
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Handle ValidationError (400) and RetrievalError (500)."""
    if exc.status_code >= 500:
        logger.error(f"Status Code: {exc.status_code} - Message: {exc.message}")
    else:
        logger.warning(f"Status Code: {exc.status_code} - Message: {exc.message}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Handle unknown paths."""
    logger.error(f"--- Inside 404 route | {request.method} {request.url.path} ---")
    return _error(404, NOT_FOUND_MESSAGE)


@app.exception_handler(405)
async def method_not_allowed_handler(request: Request, exc):
    """Unsupported methods on known paths are reported as unknown routes."""
    logger.error(f"--- Inside 404 route | {request.method} {request.url.path} ---")
    return _error(404, NOT_FOUND_MESSAGE)


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    """Handle unexpected errors."""
    logger.error(f"Internal error: {exc}")
    return _error(500, "Something went wrong")
