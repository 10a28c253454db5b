"""
Typed HTTP errors.

Every failure the service raises on purpose is an HttpError carrying
the HTTP status, a machine-readable code, a human message and an
optional structured payload. The error mapper passes these through
unchanged; anything else is classified by the mapper.
"""

from typing import Any


class HttpError(Exception):
    """Base error for all failures that map directly to an HTTP response.

    Attributes are read-only once the error is constructed.
    """

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self._status = status
        self._code = code
        self._message = message
        self._details = details

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> str:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> Any | None:
        return self._details

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._status}, {self._code!r}, {self._message!r})"


class InvalidJsonError(HttpError):
    """Raised when a request body is empty or not decodable JSON."""

    def __init__(self, message: str = "Request body must be valid JSON") -> None:
        super().__init__(400, "INVALID_JSON", message)


class PayloadTooLargeError(HttpError):
    """Raised when a request body exceeds the allowed size."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            413,
            "PAYLOAD_TOO_LARGE",
            f"Request body exceeds {max_bytes} bytes limit",
        )
        self.max_bytes = max_bytes


class UnsupportedMediaTypeError(HttpError):
    """Raised when a request body is not declared as JSON."""

    def __init__(self) -> None:
        super().__init__(
            415,
            "UNSUPPORTED_MEDIA_TYPE",
            "Content-Type must be application/json",
        )


class RateLimitExceededError(HttpError):
    """Raised when a client exceeds the request budget of a namespace."""

    def __init__(self) -> None:
        super().__init__(
            429,
            "RATE_LIMIT_EXCEEDED",
            "Too many requests, please try again later",
        )


class ConfigurationError(HttpError):
    """Raised when a required setting is missing at request time."""

    def __init__(self, name: str) -> None:
        super().__init__(
            500,
            "CONFIGURATION_ERROR",
            f"Missing required environment variable: {name}",
        )
        self.name = name


class DependencyUnavailableError(HttpError):
    """Raised when an upstream dependency cannot serve a request."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(503, "DEPENDENCY_UNAVAILABLE", message, details)


class CircuitOpenError(HttpError):
    """Raised when the circuit for a dependency is open."""

    def __init__(self, dependency: str, retry_after_ms: int) -> None:
        super().__init__(
            503,
            "DEPENDENCY_CIRCUIT_OPEN",
            f"{dependency} is temporarily unavailable",
            {"retry_after_ms": retry_after_ms},
        )
        self.dependency = dependency
        self.retry_after_ms = retry_after_ms
