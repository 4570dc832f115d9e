"""Error types raised across the CloudAvenue SDK."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional


class CavError(Exception):
    """Base class of every error raised by the SDK."""


def _trim_fraction(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(fraction).zfill(digits).rstrip('0')}"


def _format_duration(duration: timedelta) -> str:
    """Render a duration the compact way, e.g. ``2s``, ``1m30s``, ``250ms``."""
    micros = duration // timedelta(microseconds=1)
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim_fraction(micros, 1_000)}ms"
    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    seconds = _trim_fraction(rest, 1_000_000)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


class APIError(CavError):
    """An error reported by a remote API."""

    def __init__(
        self,
        *,
        operation: str = "",
        status_code: int = 0,
        status_message: str = "",
        message: str = "",
        duration: timedelta = timedelta(0),
        endpoint: str = "",
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.status_message = status_message
        self.message = message
        self.duration = duration
        self.endpoint = endpoint
        super().__init__(message)

    def is_not_found(self) -> bool:
        """Whether the API answered 404."""
        return self.status_code == 404

    def __str__(self) -> str:
        return (
            f"[{self.operation}] request API error: {self.message} "
            f"(status code: {self.status_code}, duration: {_format_duration(self.duration)}, "
            f"endpoint: {self.endpoint})"
        )

    def __repr__(self) -> str:
        return (
            f"APIError(operation={self.operation!r}, status_code={self.status_code!r}, "
            f"message={self.message!r}, endpoint={self.endpoint!r})"
        )


class ClientError(CavError):
    """An error raised on the client side, optionally carrying the API error behind it."""

    def __init__(self, message: str, api_error: Optional[APIError] = None) -> None:
        self.message = message
        self.api_error = api_error
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ClientNotInitializedError(CavError):
    """Raised when an API client is built without an underlying client."""

    def __init__(self, message: str = "client not initialized") -> None:
        super().__init__(message)


def is_api_error(err: Optional[BaseException]) -> bool:
    """Whether ``err`` is an :class:`APIError`."""
    return isinstance(err, APIError)


def is_client_error(err: Optional[BaseException]) -> bool:
    """Whether ``err`` is a :class:`ClientError`."""
    return isinstance(err, ClientError)