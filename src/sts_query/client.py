# STS Query Client
# File: client.py
# Version: v6
"""High-level client for the AWS Security Token Service.

All operations go through one generic entry point:

- invoke(operation_name, options) for synchronous callers
- ainvoke(operation_name, options) inside an event loop

Both return an ``Outcome`` (``Success`` or ``Failure``) and never raise
for request, transport, service or parse failures. Configuration problems
(secure transport disabled, unsupported API version, missing credentials)
raise ``ConfigurationError`` from the constructor.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Awaitable, Callable, List, Mapping, Optional
import asyncio
import logging

import httpx

from .catalog import OperationCatalog
from .config import StsConfig
from .dispatcher import CallTrace, OperationDispatcher
from .errors import ConfigurationError
from .mock import MOCK_CREDENTIALS, mock_transport
from .models import OperationSpec, Outcome
from .retry import RetryPolicy
from .signer import Credentials, SigV4Signer
from .sts import SERVICE_NAME, build_catalog
from .transport import QueryTransport

logger = logging.getLogger(__name__)


class StsClient:
    """Client bound to one API version of STS."""

    def __init__(
        self,
        config: Optional[StsConfig] = None,
        credentials: Optional[Credentials] = None,
        api_version: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.config = config or StsConfig.from_env()
        self.api_version = api_version or self.config.api_version

        # Fixed for the life of the client; never switched per call.
        self.catalog: OperationCatalog = build_catalog(self.api_version)

        if self.config.mock_mode and http_transport is None:
            http_transport = mock_transport()
            credentials = credentials or MOCK_CREDENTIALS

        credentials = credentials or Credentials.from_env()
        if credentials is None:
            raise ConfigurationError(
                "No AWS credentials configured. Set AWS_ACCESS_KEY_ID and "
                "AWS_SECRET_ACCESS_KEY, pass credentials=..., or enable STS_MOCK_MODE."
            )

        signer = SigV4Signer(
            credentials=credentials,
            region=self.config.region,
            service=SERVICE_NAME,
        )
        # Raises ConfigurationError when secure transport is disabled.
        self.transport = QueryTransport(
            _with_api_version(self.config, self.api_version),
            signer,
            http_transport=http_transport,
        )
        self.retry_policy = RetryPolicy.from_config(self.config, sleep=sleep)
        self.dispatcher = OperationDispatcher(
            catalog=self.catalog,
            transport=self.transport,
            retry_policy=self.retry_policy,
            call_timeout=self.config.call_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def operations(self) -> List[str]:
        return self.catalog.names()

    def describe(self, operation_name: str) -> OperationSpec:
        """Return the OperationSpec for ``operation_name`` (raises for unknown names)."""
        return self.catalog.lookup(operation_name)

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    async def ainvoke(
        self,
        operation_name: str,
        options: Optional[Mapping[str, Any]] = None,
        trace: Optional[CallTrace] = None,
    ) -> Outcome:
        return await self.dispatcher.dispatch(operation_name, options, trace=trace)

    def invoke(
        self,
        operation_name: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Outcome:
        """Run one operation to completion and return its outcome.

        Must not be called from inside a running event loop; use
        ``ainvoke`` there.
        """
        return asyncio.run(self.ainvoke(operation_name, options))

    async def ping(self) -> bool:
        """Cheap health check: catalog loaded and endpoint configured."""
        return bool(self.catalog.names()) and bool(self.transport.url)


def _with_api_version(config: StsConfig, api_version: str) -> StsConfig:
    if config.api_version == api_version:
        return config
    return replace(config, api_version=api_version)
