# STS Query Client
# File: signer.py
# Version: v2

"""Credentials and AWS Signature Version 4 request signing.

Only the subset needed for Query protocol POSTs is implemented: a single
form-encoded body, no query string, and the ``host``, ``content-type``,
``x-amz-date`` (and optional ``x-amz-security-token``) signed headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Mapping, Optional
from urllib.parse import urlparse
import hashlib
import hmac
import os

ALGORITHM = "AWS4-HMAC-SHA256"


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str
    session_token: Optional[str] = None

    @classmethod
    def from_env(cls) -> Optional["Credentials"]:
        """Read the standard AWS_* variables. Returns None when unset."""
        access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
        secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")
        if not access_key_id or not secret_access_key:
            return None
        return cls(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=os.getenv("AWS_SESSION_TOKEN") or None,
        )

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks.
        return f"Credentials(access_key_id={self.access_key_id!r}, secret_access_key='***')"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


@dataclass
class SigV4Signer:
    """Signs requests for one service in one region."""

    credentials: Credentials
    region: str
    service: str = "sts"
    clock: Callable[[], datetime] = _utcnow

    def signing_key(self, datestamp: str) -> bytes:
        k_date = _hmac(("AWS4" + self.credentials.secret_access_key).encode("utf-8"), datestamp)
        k_region = _hmac(k_date, self.region)
        k_service = _hmac(k_region, self.service)
        return _hmac(k_service, "aws4_request")

    def sign(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> Dict[str, str]:
        """Return ``headers`` plus the SigV4 date, token and Authorization."""
        now = self.clock().astimezone(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        datestamp = now.strftime("%Y%m%d")

        parsed = urlparse(url)
        signed: Dict[str, str] = dict(headers)
        signed["Host"] = parsed.netloc
        signed["X-Amz-Date"] = amz_date
        if self.credentials.session_token:
            signed["X-Amz-Security-Token"] = self.credentials.session_token

        canonical_headers = {k.lower(): " ".join(str(v).split()) for k, v in signed.items()}
        header_names = sorted(canonical_headers)
        signed_headers = ";".join(header_names)

        canonical_request = "\n".join(
            [
                method.upper(),
                parsed.path or "/",
                parsed.query,
                "".join(f"{name}:{canonical_headers[name]}\n" for name in header_names),
                signed_headers,
                _sha256_hex(body),
            ]
        )

        scope = f"{datestamp}/{self.region}/{self.service}/aws4_request"
        string_to_sign = "\n".join(
            [ALGORITHM, amz_date, scope, _sha256_hex(canonical_request.encode("utf-8"))]
        )
        signature = hmac.new(
            self.signing_key(datestamp),
            string_to_sign.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

        signed["Authorization"] = (
            f"{ALGORITHM} Credential={self.credentials.access_key_id}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )
        return signed
