"""Errors raised by the GLS tracking client."""
from __future__ import annotations

from typing import Union


class TrackingApiError(RuntimeError):
    """Base class for every error raised by this package."""


class CommunicationError(TrackingApiError):
    """Raised when the service cannot be reached or its reply cannot be read."""


class ExitCodeError(TrackingApiError):
    """Raised when the service answers with a non-success exit code."""

    def __init__(self, message: str, code: Union[int, str], description: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.description = description


class AuthenticationError(ExitCodeError):
    """The supplied credentials were rejected."""


class NoDataFoundError(ExitCodeError):
    """The query was valid but matched nothing."""


class UnknownErrorCodeError(ExitCodeError):
    """The exit code is not one the client knows how to classify."""


__all__ = [
    "AuthenticationError",
    "CommunicationError",
    "ExitCodeError",
    "NoDataFoundError",
    "TrackingApiError",
    "UnknownErrorCodeError",
]
