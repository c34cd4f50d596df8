# STS Query Client
# File: tools/tasks.py
# Version: v4
#
# NOTE: This module is the single place where we define the logic that is
# exposed as MCP tools. The stdio transport simply calls
# `register_tools(server)` to wire these up.

from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..client import StsClient
from ..config import StsConfig
from ..errors import StsQueryError
from ..models import Failure, Outcome
from ..signer import Credentials
from ..sts import supported_api_versions

_SECRET_FIELDS = {"secret_access_key", "session_token"}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _make_client() -> StsClient:
    """Create an StsClient from environment variables.

    Kept argument-free so tests can monkeypatch it with a lambda.
    """
    return StsClient(config=StsConfig.from_env())


def _to_jsonable(value: Any, redact: bool, key: Optional[str] = None) -> Any:
    if isinstance(value, dict):
        return {k: _to_jsonable(v, redact, k) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(v, redact) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if redact and key in _SECRET_FIELDS and isinstance(value, str):
        return "***redacted***"
    return value


def _outcome_to_dict(outcome: Outcome, redact: bool) -> Dict[str, Any]:
    if isinstance(outcome, Failure):
        return {
            "ok": False,
            "operation": outcome.operation,
            "error": outcome.error.to_dict(),
            "meta": {"attempts": outcome.attempts},
        }

    return {
        "ok": True,
        "operation": outcome.operation,
        "data": _to_jsonable(outcome.data, redact),
        "meta": {
            "attempts": outcome.attempts,
            "request_id": outcome.request_id,
            "redacted": redact,
        },
    }


# ---------------------------------------------------------------------------
# Core async tasks (library-style)
# ---------------------------------------------------------------------------


async def ping() -> Dict[str, Any]:
    client = _make_client()
    ok = await client.ping()
    return {"ok": bool(ok)}


async def list_operations() -> Dict[str, Any]:
    client = _make_client()
    names = client.operations()
    return {
        "api_version": client.api_version,
        "operations": names,
        "count": len(names),
    }


async def describe_operation(operation: str) -> Dict[str, Any]:
    client = _make_client()
    try:
        spec = client.describe(operation)
    except StsQueryError as exc:
        return {"ok": False, "error": exc.to_dict()}
    return {"ok": True, "operation": spec.describe()}


async def invoke_operation(
    operation: str,
    options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Invoke one catalog operation and return a JSON-serialisable outcome."""
    cfg = StsConfig.from_env()
    try:
        client = _make_client()
    except StsQueryError as exc:
        return {"ok": False, "operation": operation, "error": exc.to_dict()}

    outcome = await client.ainvoke(operation, options or {})
    return _outcome_to_dict(outcome, redact=not cfg.expose_secrets)


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


def _collect_config_info() -> Dict[str, Any]:
    """Redacted snapshot of endpoint / credential configuration from env."""
    cfg = StsConfig.from_env()
    creds = Credentials.from_env()

    url = cfg.endpoint_url
    try:
        host = urlparse(url).hostname or url
    except ValueError:
        host = url

    return {
        "endpoint_url": url,
        "host": host,
        "region": cfg.region,
        "api_version": cfg.api_version,
        "supported_api_versions": supported_api_versions(),
        "use_ssl": bool(cfg.use_ssl),
        "verify_tls": bool(cfg.verify_tls),
        "mock_mode": bool(cfg.mock_mode),
        "credentials": {
            "access_key_id_configured": creds is not None,
            "session_token_configured": bool(creds and creds.session_token),
        },
        "retry": {
            "max_attempts": cfg.max_attempts,
            "backoff_base_seconds": cfg.backoff_base_seconds,
            "backoff_max_seconds": cfg.backoff_max_seconds,
        },
        "timeouts": {
            "http_seconds": cfg.http_timeout_seconds,
            "call_seconds": cfg.call_timeout_seconds,
        },
    }


async def get_config_info() -> Dict[str, Any]:
    return _collect_config_info()


async def diagnostics() -> Dict[str, Any]:
    started = time.time()
    config_info = _collect_config_info()

    checks: List[Dict[str, Any]] = []
    overall_ok = True

    # Client init
    t0 = time.time()
    try:
        client = _make_client()
        checks.append(
            {"name": "client_init", "ok": True, "error": None, "elapsed_ms": int((time.time() - t0) * 1000)}
        )
    except StsQueryError as exc:
        checks.append(
            {
                "name": "client_init",
                "ok": False,
                "error": _make_error("CONFIG_ERROR", str(exc)),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
        return {
            "ok": False,
            "mock_mode": config_info["mock_mode"],
            "config": config_info,
            "checks": checks,
            "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
        }

    # Ping
    t0 = time.time()
    ok_ping = await client.ping()
    if not ok_ping:
        overall_ok = False
    checks.append(
        {
            "name": "ping",
            "ok": bool(ok_ping),
            "error": None if ok_ping else _make_error("BACKEND_ERROR", "Ping returned a falsy result."),
            "elapsed_ms": int((time.time() - t0) * 1000),
        }
    )

    # GetSessionToken is the cheapest call that proves signing and parsing work.
    t0 = time.time()
    outcome = await client.ainvoke("GetSessionToken", {"duration_seconds": 900})
    if isinstance(outcome, Failure):
        overall_ok = False
        checks.append(
            {
                "name": "get_session_token",
                "ok": False,
                "attempts": outcome.attempts,
                "error": outcome.error.to_dict(),
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )
    else:
        checks.append(
            {
                "name": "get_session_token",
                "ok": True,
                "attempts": outcome.attempts,
                "request_id": outcome.request_id,
                "error": None,
                "elapsed_ms": int((time.time() - t0) * 1000),
            }
        )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {"elapsed_ms": int((time.time() - started) * 1000)},
    }


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(name="sts_ping", description="Basic health check for the STS MCP server.")
    async def mcp_ping() -> Dict[str, Any]:
        return await ping()

    @server.tool(name="sts_list_operations", description="List the STS operations this client can invoke.")
    async def mcp_list_operations() -> Dict[str, Any]:
        return await list_operations()

    @server.tool(
        name="sts_describe_operation",
        description="Show required and optional parameters (with kinds) for one STS operation.",
    )
    async def mcp_describe_operation(operation: str) -> Dict[str, Any]:
        return await describe_operation(operation=operation)

    @server.tool(
        name="sts_invoke",
        description=(
            "Invoke an STS operation such as AssumeRole or GetSessionToken. "
            "Options use snake_case names, e.g. {'role_arn': ..., 'role_session_name': ...}."
        ),
    )
    async def mcp_invoke(operation: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await invoke_operation(operation=operation, options=options)

    @server.tool(name="sts_get_config_info", description="Redacted view of the STS endpoint and credential configuration.")
    async def mcp_get_config_info() -> Dict[str, Any]:
        return await get_config_info()

    @server.tool(name="sts_diagnostics", description="Run client init, ping and a GetSessionToken round trip.")
    async def mcp_diagnostics() -> Dict[str, Any]:
        return await diagnostics()
