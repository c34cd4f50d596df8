# STS Query Client
# File: tests/test_config.py
# Version: v1

from __future__ import annotations

from sts_query.config import StsConfig


def test_defaults_from_empty_env():
    cfg = StsConfig.from_env()

    assert cfg.endpoint == "sts.amazonaws.com"
    assert cfg.region == "us-east-1"
    assert cfg.api_version == "2011-06-15"
    assert cfg.max_attempts == 4
    assert cfg.backoff_base_seconds == 0.3
    assert cfg.mock_mode is False
    assert cfg.endpoint_url == "https://sts.amazonaws.com"


def test_env_values_are_parsed_and_clamped(monkeypatch):
    monkeypatch.setenv("STS_MAX_ATTEMPTS", "99")
    monkeypatch.setenv("STS_BACKOFF_BASE_MS", "not-a-number")
    monkeypatch.setenv("STS_USE_SSL", "off")
    monkeypatch.setenv("STS_MOCK_MODE", "yes")
    monkeypatch.setenv("STS_LOG_LEVEL", "debug")

    cfg = StsConfig.from_env()

    assert cfg.max_attempts == 10
    assert cfg.backoff_base_seconds == 0.3
    assert cfg.use_ssl is False
    assert cfg.mock_mode is True
    assert cfg.log_level == "DEBUG"


def test_endpoint_url_keeps_explicit_scheme():
    assert StsConfig(endpoint="https://sts.eu-west-1.amazonaws.com/").endpoint_url == (
        "https://sts.eu-west-1.amazonaws.com"
    )
    assert StsConfig(endpoint="localhost:4566", use_ssl=False).endpoint_url == "http://localhost:4566"
