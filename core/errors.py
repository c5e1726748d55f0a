"""
Application Errors

Errors that carry their own HTTP status so the FastAPI exception handlers in
app/main.py can turn them into the standard `{status: false, message}` body.

Hierarchy:
    AppError
    ├── ValidationError  (400) - missing or malformed query parameters
    └── RetrievalError   (500) - upstream failure or requested series absent

ConfigurationError is raised at startup only and never reaches a client.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """
    Base class for errors that are reported to the client.

    Attributes:
        message: Human readable message returned in the response body
        status_code: HTTP status code for the response
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Request parameters are missing or cannot be parsed."""

    status_code = status.HTTP_400_BAD_REQUEST


class RetrievalError(AppError):
    """Time-series data could not be produced for the request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ConfigurationError(Exception):
    """Raised at startup when the environment does not describe a runnable server."""
