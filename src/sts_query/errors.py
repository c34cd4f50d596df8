# STS Query Client
# File: errors.py
# Version: v2

"""Exception hierarchy for the Query protocol client.

Every failure a dispatched call can end in is one of these. They are
carried inside a ``Failure`` outcome rather than raised out of ``invoke``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class StsQueryError(Exception):
    """Base class for all client errors."""

    code = "STS_QUERY_ERROR"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class ConfigurationError(StsQueryError):
    """Invalid client configuration. Raised at construction time."""

    code = "CONFIG_ERROR"


class CatalogError(StsQueryError):
    """Operation catalog was misused while it was being built."""

    code = "CATALOG_ERROR"


# ---------------------------------------------------------------------------
# Client-side validation
# ---------------------------------------------------------------------------


class ValidationError(StsQueryError):
    """Request rejected before any network I/O."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        if self.field is not None:
            out["details"] = {"field": self.field}
        return out


class MissingRequiredParameter(ValidationError):
    code = "MISSING_REQUIRED_PARAMETER"

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required parameter '{field}'.", field=field)


class InvalidParameterType(ValidationError):
    code = "INVALID_PARAMETER_TYPE"

    def __init__(self, field: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Parameter '{field}' expects {expected}, got {actual}.",
            field=field,
        )
        self.expected = expected
        self.actual = actual


class UnknownParameter(ValidationError):
    code = "UNKNOWN_PARAMETER"

    def __init__(self, field: str, context: str) -> None:
        super().__init__(
            f"Unexpected parameter '{field}' for {context}.",
            field=field,
        )


class UnknownOperationError(ValidationError):
    code = "UNKNOWN_OPERATION"

    def __init__(self, operation: str, api_version: str) -> None:
        super().__init__(
            f"Unknown operation '{operation}' for API version {api_version}."
        )
        self.operation = operation


# ---------------------------------------------------------------------------
# Remote failures
# ---------------------------------------------------------------------------


class TransportError(StsQueryError):
    """Network-level failure: connection refused, reset, timeout."""

    code = "TRANSPORT_ERROR"


class ServiceError(StsQueryError):
    """Well-formed error response returned by the remote service."""

    def __init__(
        self,
        code: str,
        message: str,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
        error_type: Optional[str] = None,
    ) -> None:
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        self.error_type = error_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": {
                "request_id": self.request_id,
                "status_code": self.status_code,
                "type": self.error_type,
            },
        }


class ParseError(StsQueryError):
    """Response body does not satisfy the declared response shape."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{message} (at {path})")
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["details"] = {"path": self.path}
        return out
