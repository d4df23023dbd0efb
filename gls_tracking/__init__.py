"""GLS parcel tracking client package."""

from .client import TrackingClient, normalize_reference
from .config import TrackingSettings
from .exceptions import (
    AuthenticationError,
    CommunicationError,
    ExitCodeError,
    NoDataFoundError,
    TrackingApiError,
    UnknownErrorCodeError,
)
from .executor import Executor, SoapExecutor
from .models import (
    DateTime,
    ExitCode,
    Parameters,
    TuDetailsResponse,
    TuListResponse,
    TuPODResponse,
    UserCredentials,
)

__all__ = [
    "AuthenticationError",
    "CommunicationError",
    "DateTime",
    "ExitCode",
    "ExitCodeError",
    "Executor",
    "NoDataFoundError",
    "Parameters",
    "SoapExecutor",
    "TrackingApiError",
    "TrackingClient",
    "TrackingSettings",
    "TuDetailsResponse",
    "TuListResponse",
    "TuPODResponse",
    "UnknownErrorCodeError",
    "UserCredentials",
    "normalize_reference",
]
