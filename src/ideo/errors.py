"""Error taxonomy for the ideo CLI.

Run-level errors abort before any image is committed. ``FetchError`` and
``WriteError`` are scoped to a single image and never abort siblings.
"""

from __future__ import annotations

from pathlib import Path


class IdeoError(Exception):
    """Base class for every failure the CLI reports to the user."""

    exit_code = 1


class UsageError(IdeoError):
    exit_code = 2


class AuthError(IdeoError):
    pass


class ConfigError(IdeoError):
    """An environment setting has an invalid value."""


class ApiError(IdeoError):
    """The upstream API rejected the request with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"API returned HTTP {status}: {message}")


class ProtocolError(IdeoError):
    """The response does not have the expected shape."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)


class TransportError(IdeoError):
    pass


class RequestTimeoutError(IdeoError):
    pass


class FetchError(IdeoError):
    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"image {index}: download failed: {reason}")


class WriteError(IdeoError):
    def __init__(self, index: int, path: Path, reason: str) -> None:
        self.index = index
        self.path = path
        self.reason = reason
        super().__init__(f"image {index}: failed to write {path}: {reason}")


__all__ = [
    "ApiError",
    "AuthError",
    "ConfigError",
    "FetchError",
    "IdeoError",
    "ProtocolError",
    "RequestTimeoutError",
    "TransportError",
    "UsageError",
    "WriteError",
]
