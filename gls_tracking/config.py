"""Environment driven configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .client import DEFAULT_LANGUAGE, TrackingClient
from .executor import DEFAULT_NAMESPACE, SoapExecutor
from .models import UserCredentials


@dataclass(frozen=True)
class TrackingSettings:
    """Connection and account settings for the tracking service."""

    endpoint: str
    user_name: str
    password: str = field(repr=False)
    namespace: str = DEFAULT_NAMESPACE
    timeout: float = 15
    language: str = DEFAULT_LANGUAGE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TrackingSettings":
        """Read settings from ``GLS_TRACKING_*`` variables.

        Raises :class:`ValueError` when the endpoint or the account data is
        missing, or when the timeout is not a number.
        """
        env = os.environ if environ is None else environ

        endpoint = env.get("GLS_TRACKING_ENDPOINT", "").strip()
        user_name = env.get("GLS_TRACKING_USERNAME", "").strip()
        password = env.get("GLS_TRACKING_PASSWORD", "")

        missing = [
            name
            for name, value in (
                ("GLS_TRACKING_ENDPOINT", endpoint),
                ("GLS_TRACKING_USERNAME", user_name),
                ("GLS_TRACKING_PASSWORD", password),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"Missing configuration: {', '.join(missing)}")

        raw_timeout = env.get("GLS_TRACKING_TIMEOUT", "15")
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"GLS_TRACKING_TIMEOUT must be a number, got {raw_timeout!r}") from exc

        return cls(
            endpoint=endpoint,
            user_name=user_name,
            password=password,
            namespace=env.get("GLS_TRACKING_NAMESPACE") or DEFAULT_NAMESPACE,
            timeout=timeout,
            language=env.get("GLS_TRACKING_LANGUAGE") or DEFAULT_LANGUAGE,
        )

    @property
    def credentials(self) -> UserCredentials:
        return UserCredentials(self.user_name, self.password)

    def build_client(self) -> TrackingClient:
        executor = SoapExecutor(self.endpoint, namespace=self.namespace, timeout=self.timeout)
        return TrackingClient(executor, self.credentials)


__all__ = ["TrackingSettings"]
