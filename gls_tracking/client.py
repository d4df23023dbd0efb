"""High level client for the GLS parcel tracking API.

The client exposes three fixed operations.  Each one builds a request,
attaches the account credentials, hands the request to an
:class:`~gls_tracking.executor.Executor` and inspects the exit code of the
reply.  Successful replies are returned untouched; anything else becomes one
of the exceptions in :mod:`gls_tracking.exceptions`.

Transport failures raised by the executor are never caught here.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Optional, Type, TypeVar, Union

from .exceptions import (
    AuthenticationError,
    ExitCodeError,
    NoDataFoundError,
    UnknownErrorCodeError,
)
from .executor import Executor
from .models import (
    DateTime,
    ExitCode,
    Parameters,
    Request,
    TuDetailsRequest,
    TuDetailsResponse,
    TuListRequest,
    TuListResponse,
    TuPODRequest,
    TuPODResponse,
    UserCredentials,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", TuDetailsResponse, TuListResponse, TuPODResponse)

REFERENCE_LENGTH = 11
DEFAULT_LANGUAGE = "EN"


def normalize_reference(reference: str) -> str:
    """Return the first eleven characters of ``reference``.

    The service only understands eleven character parcel numbers.  Longer
    input is cut rather than rejected.
    """
    return reference[:REFERENCE_LENGTH]


class TrackingClient:
    """Client for the ``GetTuDetail``, ``GetTuList`` and ``GetTuPOD`` operations."""

    def __init__(self, executor: Executor, credentials: UserCredentials) -> None:
        self.executor = executor
        self.credentials = credentials

    def get_parcel_details(self, reference: str, language: str = DEFAULT_LANGUAGE) -> TuDetailsResponse:
        request = TuDetailsRequest(normalize_reference(reference), Parameters.language(language))
        return self._dispatch("GetTuDetail", request, TuDetailsResponse)

    def get_parcel_list(
        self,
        date_from: Union[dt.datetime, dt.date],
        date_to: Union[dt.datetime, dt.date],
        reference: Optional[str] = None,
        customer_reference: Optional[str] = None,
        language: str = DEFAULT_LANGUAGE,
    ) -> TuListResponse:
        request = TuListRequest(
            DateTime.from_datetime(date_from),
            DateTime.from_datetime(date_to),
            normalize_reference(reference) if reference else None,
            customer_reference,
            Parameters.language(language),
        )
        return self._dispatch("GetTuList", request, TuListResponse)

    def get_proof_of_delivery(self, reference: str, language: str = DEFAULT_LANGUAGE) -> TuPODResponse:
        request = TuPODRequest(normalize_reference(reference), Parameters.language(language))
        return self._dispatch("GetTuPOD", request, TuPODResponse)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _dispatch(self, operation: str, request: Request, response_type: Type[R]) -> R:
        envelope = {operation: request.with_credentials(self.credentials)}

        logger.debug("Calling %s", operation)
        response = self.executor.execute(operation, envelope, response_type)

        exit_code = response.exit_code
        if not exit_code.is_successful:
            logger.warning(
                "%s failed with exit code %s: %s", operation, exit_code.code, exit_code.description
            )
            raise self._create_exception(exit_code)

        return response

    @staticmethod
    def _create_exception(exit_code: ExitCode) -> ExitCodeError:
        if exit_code.is_authentication_error:
            return AuthenticationError(exit_code.description, exit_code.code, exit_code.description)
        if exit_code.is_no_data_found:
            return NoDataFoundError(exit_code.description, exit_code.code, exit_code.description)

        return UnknownErrorCodeError(
            f'Unknown error given with code "{exit_code.code}" and message "{exit_code.description}"',
            exit_code.code,
            exit_code.description,
        )


__all__ = ["DEFAULT_LANGUAGE", "REFERENCE_LENGTH", "TrackingClient", "normalize_reference"]
