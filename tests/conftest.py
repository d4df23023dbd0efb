from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

import pytest

from gls_tracking import TrackingClient, UserCredentials
from gls_tracking.models import ExitCode


class StubExecutor:
    """Records every call and answers with a canned response."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, Mapping[str, Any], type]] = []

    def execute(self, operation, envelope, response_type):
        self.calls.append((operation, envelope, response_type))
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return response_type(exit_code=ExitCode(ExitCode.CODE_SUCCESSFULLY, "OK"))

    @property
    def last_request(self):
        operation, envelope, _ = self.calls[-1]
        return envelope[operation]


@pytest.fixture
def credentials() -> UserCredentials:
    return UserCredentials("tracking-user", "secret")


@pytest.fixture
def executor() -> StubExecutor:
    return StubExecutor()


@pytest.fixture
def client(executor: StubExecutor, credentials: UserCredentials) -> TrackingClient:
    return TrackingClient(executor, credentials)
