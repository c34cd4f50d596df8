# STS Query Client
# File: config.py
# Version: v3

"""Configuration loading for the STS Query client."""

from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_ENDPOINT = "sts.amazonaws.com"
DEFAULT_REGION = "us-east-1"
DEFAULT_API_VERSION = "2011-06-15"


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


@dataclass
class StsConfig:
    """Connection, retry and timeout settings for an STS client.

    ``use_ssl`` is checked once when the transport is built; the service
    must never be called over plain HTTP.
    """

    endpoint: str = DEFAULT_ENDPOINT
    region: str = DEFAULT_REGION
    api_version: str = DEFAULT_API_VERSION
    use_ssl: bool = True
    verify_tls: bool = True

    # Retry policy
    max_attempts: int = 4
    backoff_base_seconds: float = 0.3
    backoff_max_seconds: float = 20.0

    # Timeouts
    http_timeout_seconds: float = 30.0
    call_timeout_seconds: float = 120.0

    mock_mode: bool = False
    expose_secrets: bool = False
    log_level: str = "WARNING"

    @property
    def endpoint_url(self) -> str:
        """Endpoint as an absolute URL.

        A bare host gets ``https://`` when ``use_ssl`` is on and ``http://``
        otherwise, so the transport can reject the latter.
        """
        endpoint = self.endpoint.strip().rstrip("/")
        if "://" in endpoint:
            return endpoint
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{endpoint}"

    @classmethod
    def from_env(cls) -> "StsConfig":
        """Create configuration from environment variables."""
        endpoint = os.getenv("STS_ENDPOINT") or DEFAULT_ENDPOINT
        region = os.getenv("STS_REGION") or DEFAULT_REGION
        api_version = os.getenv("STS_API_VERSION") or DEFAULT_API_VERSION

        use_ssl = _parse_bool_env("STS_USE_SSL", default=True)
        verify_tls = _parse_bool_env("STS_VERIFY_TLS", default=True)

        max_attempts = _parse_int_env(
            "STS_MAX_ATTEMPTS", default=4, min_value=1, max_value=10
        )
        backoff_base_ms = _parse_int_env(
            "STS_BACKOFF_BASE_MS", default=300, min_value=1, max_value=60000
        )
        backoff_max_ms = _parse_int_env(
            "STS_BACKOFF_MAX_MS", default=20000, min_value=0, max_value=300000
        )

        http_timeout = _parse_int_env(
            "STS_HTTP_TIMEOUT_SECONDS", default=30, min_value=1, max_value=600
        )
        call_timeout = _parse_int_env(
            "STS_CALL_TIMEOUT_SECONDS", default=120, min_value=1, max_value=3600
        )

        mock_mode = _parse_bool_env("STS_MOCK_MODE", default=False)
        expose_secrets = _parse_bool_env("STS_EXPOSE_SECRETS", default=False)
        log_level = (os.getenv("STS_LOG_LEVEL") or "WARNING").strip().upper()

        return cls(
            endpoint=endpoint,
            region=region,
            api_version=api_version,
            use_ssl=use_ssl,
            verify_tls=verify_tls,
            max_attempts=max_attempts,
            backoff_base_seconds=backoff_base_ms / 1000.0,
            backoff_max_seconds=backoff_max_ms / 1000.0,
            http_timeout_seconds=float(http_timeout),
            call_timeout_seconds=float(call_timeout),
            mock_mode=mock_mode,
            expose_secrets=expose_secrets,
            log_level=log_level,
        )
