from __future__ import annotations

import pytest

from gls_tracking import SoapExecutor, TrackingClient, TrackingSettings, UserCredentials

ENV = {
    "GLS_TRACKING_ENDPOINT": "https://tracking.example.com/soap",
    "GLS_TRACKING_USERNAME": "user",
    "GLS_TRACKING_PASSWORD": "secret",
}


def test_from_env_defaults():
    settings = TrackingSettings.from_env(ENV)

    assert settings.endpoint == ENV["GLS_TRACKING_ENDPOINT"]
    assert settings.timeout == 15
    assert settings.language == "EN"
    assert settings.credentials == UserCredentials("user", "secret")


def test_from_env_overrides():
    settings = TrackingSettings.from_env(
        {**ENV, "GLS_TRACKING_TIMEOUT": "2.5", "GLS_TRACKING_LANGUAGE": "DE", "GLS_TRACKING_NAMESPACE": "urn:x"}
    )
    assert settings.timeout == 2.5
    assert settings.language == "DE"
    assert settings.namespace == "urn:x"


def test_from_env_reads_process_environment(monkeypatch):
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    assert TrackingSettings.from_env().user_name == "user"


def test_missing_values_are_reported():
    with pytest.raises(ValueError, match="GLS_TRACKING_PASSWORD"):
        TrackingSettings.from_env({k: v for k, v in ENV.items() if k != "GLS_TRACKING_PASSWORD"})


def test_invalid_timeout():
    with pytest.raises(ValueError, match="GLS_TRACKING_TIMEOUT"):
        TrackingSettings.from_env({**ENV, "GLS_TRACKING_TIMEOUT": "soon"})


def test_build_client():
    client = TrackingSettings.from_env({**ENV, "GLS_TRACKING_TIMEOUT": "3"}).build_client()

    assert isinstance(client, TrackingClient)
    assert isinstance(client.executor, SoapExecutor)
    assert client.executor.timeout == 3
    assert client.credentials == UserCredentials("user", "secret")
