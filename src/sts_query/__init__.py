# STS Query Client
# File: __init__.py
# Version: v2

"""Top-level package for the STS Query protocol client."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import StsClient
from .config import StsConfig
from .errors import (
    ConfigurationError,
    ParseError,
    ServiceError,
    StsQueryError,
    TransportError,
    ValidationError,
)
from .models import Failure, Outcome, Success

__all__ = [
    "__version__",
    "StsClient",
    "StsConfig",
    "Outcome",
    "Success",
    "Failure",
    "StsQueryError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "ServiceError",
    "ParseError",
]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Falls back to a reasonable default when running from source without an
    installed distribution.
    """
    try:
        return version("sts-query-client")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _resolve_version()
