# STS Query Client
# File: transport.py
# Version: v3

"""Signed HTTPS transport for Query protocol requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode, urlparse
import logging

import httpx
from httpx import RequestError, TimeoutException

from .config import StsConfig
from .errors import ConfigurationError, TransportError
from .signer import SigV4Signer

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


@dataclass
class RawResponse:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


class QueryTransport:
    """Builds, signs and sends one form-encoded POST per call.

    Secure transport is validated once, here in the constructor. ``send``
    never re-checks it.

    ``http_transport`` lets callers plug an ``httpx`` transport in (mock mode
    and tests use ``httpx.MockTransport``). Each ``send`` opens its own
    ``httpx.AsyncClient`` so concurrent calls share nothing but this object's
    immutable settings.
    """

    def __init__(
        self,
        config: StsConfig,
        signer: SigV4Signer,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not config.use_ssl:
            raise ConfigurationError(
                "AWS Security Token Service (STS) requires ssl but use_ssl is "
                "set to false. Set STS_USE_SSL=1 (or use_ssl=True)."
            )

        url = config.endpoint_url
        if urlparse(url).scheme != "https":
            raise ConfigurationError(
                f"Endpoint '{url}' is not an https URL; STS requires ssl."
            )

        self.config = config
        self.signer = signer
        self.url = url if urlparse(url).path else f"{url}/"
        self._http_transport = http_transport

    def build_body(self, action: str, wire_params: Mapping[str, str]) -> bytes:
        """Form-encode ``Action``, ``Version`` and params in sorted key order."""
        params = dict(wire_params)
        params["Action"] = action
        params["Version"] = self.config.api_version
        return urlencode(sorted(params.items())).encode("utf-8")

    async def send(self, action: str, wire_params: Mapping[str, str]) -> RawResponse:
        body = self.build_body(action, wire_params)
        headers = self.signer.sign(
            "POST",
            self.url,
            {"Content-Type": CONTENT_TYPE},
            body,
        )

        logger.debug("POST %s Action=%s (%d bytes)", self.url, action, len(body))

        async with httpx.AsyncClient(
            timeout=self.config.http_timeout_seconds,
            verify=self.config.verify_tls,
            transport=self._http_transport,
        ) as http_client:
            try:
                response = await http_client.post(self.url, content=body, headers=headers)
            except TimeoutException as exc:
                raise TransportError(
                    f"Timed out calling {action} at '{self.url}': {exc}"
                ) from exc
            except RequestError as exc:
                raise TransportError(
                    f"Error calling {action} at '{self.url}': {exc}"
                ) from exc

        logger.debug("%s -> HTTP %s", action, response.status_code)

        return RawResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
