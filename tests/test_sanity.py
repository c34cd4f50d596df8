# STS Query Client
# File: tests/test_sanity.py
# Version: v2

"""Basic sanity tests for package wiring."""

import asyncio

from sts_query import StsClient, StsConfig, __version__


def test_version_is_a_string() -> None:
    assert isinstance(__version__, str)


def test_config_from_env_minimal() -> None:
    config = StsConfig.from_env()
    assert config is not None
    assert config.use_ssl is True


def test_client_ping_runs_in_mock_mode() -> None:
    client = StsClient(config=StsConfig(mock_mode=True))

    result = asyncio.run(client.ping())
    assert isinstance(result, bool)
    assert result is True
