#!/usr/bin/env python3
"""
Start script - runs the API on the port given by the PORT environment variable.

The process exits with status 1 before binding anything if PORT is missing.
SIGINT / SIGTERM trigger uvicorn's graceful shutdown, which flushes the cache.
"""
import sys

if __name__ == "__main__":
    from core.errors import ConfigurationError

    try:
        from core.config import settings
    except ConfigurationError as e:
        print(f"Startup failed: {e}", file=sys.stderr)
        sys.exit(1)

    # Import and run uvicorn programmatically
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
