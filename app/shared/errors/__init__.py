"""
Shared error handling package.

Centralizes the error taxonomy and the failure-to-HTTP mapping so that
every route reports failures with the same status, code and envelope.
"""

from app.shared.errors.mapper import MappedError, map_error
from app.shared.errors.tagged import (
    CircuitOpenError,
    ConfigurationError,
    DependencyUnavailableError,
    HttpError,
    InvalidJsonError,
    PayloadTooLargeError,
    RateLimitExceededError,
    UnsupportedMediaTypeError,
)

__all__ = [
    "CircuitOpenError",
    "ConfigurationError",
    "DependencyUnavailableError",
    "HttpError",
    "InvalidJsonError",
    "MappedError",
    "PayloadTooLargeError",
    "RateLimitExceededError",
    "UnsupportedMediaTypeError",
    "map_error",
]
