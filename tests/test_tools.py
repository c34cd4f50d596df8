# STS Query Client
# File: tests/test_tools.py
# Version: v1

from __future__ import annotations

import pytest

from sts_query.tools import tasks


class DummyServer:
    """Minimal duck-typed MCP server that records registered tool names."""

    def __init__(self) -> None:
        self.names = []

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.names.append(kwargs.get("name"))
            return fn

        return decorator


def test_register_tools_names():
    server = DummyServer()
    tasks.register_tools(server)

    assert set(server.names) == {
        "sts_ping",
        "sts_list_operations",
        "sts_describe_operation",
        "sts_invoke",
        "sts_get_config_info",
        "sts_diagnostics",
    }


def test_register_tools_rejects_non_server():
    with pytest.raises(ValueError):
        tasks.register_tools(object())


@pytest.mark.asyncio
async def test_list_operations_mock_mode(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")

    out = await tasks.list_operations()

    assert out["api_version"] == "2011-06-15"
    assert out["count"] == 5
    assert "AssumeRole" in out["operations"]


@pytest.mark.asyncio
async def test_describe_operation(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")

    out = await tasks.describe_operation("GetFederationToken")
    assert out["ok"] is True
    assert out["operation"]["required"] == ["name"]
    assert out["operation"]["params"]["duration_seconds"] == "integer"

    missing = await tasks.describe_operation("Nope")
    assert missing["ok"] is False
    assert missing["error"]["code"] == "UNKNOWN_OPERATION"


@pytest.mark.asyncio
async def test_invoke_mock_mode_redacts_secrets(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")

    out = await tasks.invoke_operation(
        "AssumeRole",
        {"role_arn": "arn:aws:iam::123456789012:role/demo", "role_session_name": "sess1", "duration_seconds": 900},
    )

    assert out["ok"] is True
    creds = out["data"]["credentials"]
    assert creds["access_key_id"] == "ASIAMOCKTEMPORARY000"
    assert creds["secret_access_key"] == "***redacted***"
    assert creds["session_token"] == "***redacted***"
    assert isinstance(creds["expiration"], str)
    assert out["meta"]["attempts"] == 1
    assert out["meta"]["request_id"]


@pytest.mark.asyncio
async def test_invoke_can_expose_secrets(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")
    monkeypatch.setenv("STS_EXPOSE_SECRETS", "1")

    out = await tasks.invoke_operation("GetSessionToken", {})

    assert out["data"]["credentials"]["secret_access_key"].startswith("mock/")
    assert out["meta"]["redacted"] is False


@pytest.mark.asyncio
async def test_invoke_validation_error_shape(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")

    out = await tasks.invoke_operation("AssumeRole", {"role_arn": "arn"})

    assert out["ok"] is False
    assert out["error"]["code"] == "MISSING_REQUIRED_PARAMETER"
    assert out["error"]["details"] == {"field": "role_session_name"}
    assert out["meta"]["attempts"] == 0


@pytest.mark.asyncio
async def test_invoke_reports_configuration_error(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")
    monkeypatch.setenv("STS_USE_SSL", "0")

    out = await tasks.invoke_operation("GetSessionToken", {})

    assert out["ok"] is False
    assert out["error"]["code"] == "CONFIG_ERROR"


@pytest.mark.asyncio
async def test_config_info_does_not_leak_secrets(monkeypatch):
    monkeypatch.setenv("STS_ENDPOINT", "sts.eu-west-1.amazonaws.com")
    monkeypatch.setenv("STS_REGION", "eu-west-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "super-secret")

    info = await tasks.get_config_info()

    assert info["host"] == "sts.eu-west-1.amazonaws.com"
    assert info["region"] == "eu-west-1"
    assert info["credentials"]["access_key_id_configured"] is True
    assert "super-secret" not in repr(info)


@pytest.mark.asyncio
async def test_diagnostics_mock_mode(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")

    result = await tasks.diagnostics()

    assert result["ok"] is True
    assert result["mock_mode"] is True
    names = {c["name"] for c in result["checks"]}
    assert {"client_init", "ping", "get_session_token"} <= names


@pytest.mark.asyncio
async def test_diagnostics_reports_client_init_failure(monkeypatch):
    monkeypatch.setenv("STS_MOCK_MODE", "1")
    monkeypatch.setenv("STS_USE_SSL", "0")

    result = await tasks.diagnostics()

    assert result["ok"] is False
    assert result["checks"][0]["name"] == "client_init"
    assert result["checks"][0]["ok"] is False


@pytest.mark.asyncio
async def test_ping_uses_make_client(monkeypatch):
    class _FakeClient:
        async def ping(self) -> bool:
            return True

    monkeypatch.setattr(tasks, "_make_client", lambda: _FakeClient())

    assert await tasks.ping() == {"ok": True}
