# STS Query Client
# File: mock.py
# Version: v2

"""In-process stand-in for the STS endpoint.

Activated when STS_MOCK_MODE is truthy. ``MockStsService`` is plugged into
the real transport through ``httpx.MockTransport``, so mock calls still go
through encoding, signing, retry and XML parsing. Only the network hop is
replaced.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
from urllib.parse import parse_qsl
import uuid

import httpx

from .signer import Credentials

MOCK_CREDENTIALS = Credentials(
    access_key_id="AKIAMOCKACCESSKEY000",
    secret_access_key="mock/secret/access/key/000000000000000",
)

_NS = "https://sts.amazonaws.com/doc/2011-06-15/"
_ACCOUNT_ID = "123456789012"


def _xml_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _credentials_xml(duration_seconds: int) -> str:
    expiration = datetime.now(timezone.utc) + timedelta(seconds=duration_seconds)
    return (
        "<Credentials>"
        "<AccessKeyId>ASIAMOCKTEMPORARY000</AccessKeyId>"
        "<SecretAccessKey>mock/temporary/secret/key/0000000000000</SecretAccessKey>"
        "<SessionToken>FQoGZXIvYXdzEMock//////////wEaDMockSessionToken</SessionToken>"
        f"<Expiration>{expiration.strftime('%Y-%m-%dT%H:%M:%S.000Z')}</Expiration>"
        "</Credentials>"
    )


def _envelope(action: str, result: str, request_id: str) -> str:
    return (
        f'<{action}Response xmlns="{_NS}">'
        f"<{action}Result>{result}</{action}Result>"
        f"<ResponseMetadata><RequestId>{request_id}</RequestId></ResponseMetadata>"
        f"</{action}Response>"
    )


def error_body(code: str, message: str, request_id: str = "mock-request-id", error_type: str = "Sender") -> str:
    return (
        f'<ErrorResponse xmlns="{_NS}">'
        f"<Error><Type>{error_type}</Type><Code>{code}</Code>"
        f"<Message>{_xml_escape(message)}</Message></Error>"
        f"<RequestId>{request_id}</RequestId>"
        "</ErrorResponse>"
    )


class MockStsService:
    """Answers STS actions with canned, well-formed XML."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, str]] = []
        self._handlers: Dict[str, Callable[[Dict[str, str]], str]] = {
            "AssumeRole": self._assume_role,
            "AssumeRoleWithWebIdentity": self._assume_role_with_web_identity,
            "DecodeAuthorizationMessage": self._decode_authorization_message,
            "GetFederationToken": self._get_federation_token,
            "GetSessionToken": self._get_session_token,
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        params = dict(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))
        self.calls.append(params)
        request_id = str(uuid.uuid4())

        if "Authorization" not in request.headers:
            return self._error(403, "MissingAuthenticationToken", "Request is missing Authentication Token", request_id)

        action = params.get("Action", "")
        handler = self._handlers.get(action)
        if handler is None:
            return self._error(400, "InvalidAction", f"Could not find operation {action}", request_id)

        body = _envelope(action, handler(params), request_id)
        return httpx.Response(200, text=body, headers={"Content-Type": "text/xml"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @staticmethod
    def _error(status: int, code: str, message: str, request_id: str) -> httpx.Response:
        return httpx.Response(
            status,
            text=error_body(code, message, request_id),
            headers={"Content-Type": "text/xml"},
        )

    @staticmethod
    def _duration(params: Dict[str, str], default: int) -> int:
        try:
            return int(params.get("DurationSeconds") or default)
        except ValueError:
            return default

    def _assumed_role_user_xml(self, params: Dict[str, str]) -> str:
        role_arn = params.get("RoleArn", "")
        role_name = role_arn.rsplit("/", 1)[-1] or "mock-role"
        session = _xml_escape(params.get("RoleSessionName", ""))
        return (
            "<AssumedRoleUser>"
            f"<AssumedRoleId>AROAMOCKROLEID000:{session}</AssumedRoleId>"
            f"<Arn>arn:aws:sts::{_ACCOUNT_ID}:assumed-role/{_xml_escape(role_name)}/{session}</Arn>"
            "</AssumedRoleUser>"
        )

    def _packed_policy_size(self, params: Dict[str, str]) -> str:
        if not params.get("Policy"):
            return ""
        return f"<PackedPolicySize>{min(100, len(params['Policy']) // 10)}</PackedPolicySize>"

    def _assume_role(self, params: Dict[str, str]) -> str:
        return (
            _credentials_xml(self._duration(params, 3600))
            + self._assumed_role_user_xml(params)
            + self._packed_policy_size(params)
        )

    def _assume_role_with_web_identity(self, params: Dict[str, str]) -> str:
        return (
            _credentials_xml(self._duration(params, 3600))
            + "<SubjectFromWebIdentityToken>mock-subject</SubjectFromWebIdentityToken>"
            + self._assumed_role_user_xml(params)
            + self._packed_policy_size(params)
        )

    def _decode_authorization_message(self, params: Dict[str, str]) -> str:
        message = '{"allowed":false,"explicitDeny":false,"context":{"mock":true}}'
        return f"<DecodedMessage>{_xml_escape(message)}</DecodedMessage>"

    def _get_federation_token(self, params: Dict[str, str]) -> str:
        name = _xml_escape(params.get("Name", ""))
        return (
            _credentials_xml(self._duration(params, 43200))
            + "<FederatedUser>"
            f"<FederatedUserId>{_ACCOUNT_ID}:{name}</FederatedUserId>"
            f"<Arn>arn:aws:sts::{_ACCOUNT_ID}:federated-user/{name}</Arn>"
            "</FederatedUser>"
            + self._packed_policy_size(params)
        )

    def _get_session_token(self, params: Dict[str, str]) -> str:
        return _credentials_xml(self._duration(params, 43200))


def mock_transport(service: Optional[MockStsService] = None) -> httpx.MockTransport:
    return (service or MockStsService()).transport()
