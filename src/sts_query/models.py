# STS Query Client
# File: models.py
# Version: v3

"""Domain models: catalog metadata, requests and call outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import StsQueryError


class ParamKind(str, Enum):
    """Wire-level kinds shared by request parameters and response shapes."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    LIST = "list"
    STRUCTURE = "structure"

    @property
    def is_scalar(self) -> bool:
        return self not in (ParamKind.LIST, ParamKind.STRUCTURE)


@dataclass(frozen=True)
class ParamSpec:
    """One request parameter.

    ``name`` is the snake_case option a caller passes; ``wire_name`` is the
    key used on the wire. Lists describe their elements in ``member`` and
    structures their fields in ``members``.
    """

    name: str
    wire_name: str
    kind: ParamKind = ParamKind.STRING
    required: bool = False
    member: Optional["ParamSpec"] = None
    members: Tuple["ParamSpec", ...] = ()


@dataclass(frozen=True)
class ShapeSpec:
    """Recursive description of an expected response value."""

    kind: ParamKind
    wire_name: str = ""
    required: bool = False
    member: Optional["ShapeSpec"] = None
    members: Tuple[Tuple[str, "ShapeSpec"], ...] = ()


@dataclass(frozen=True)
class OperationSpec:
    name: str
    required_params: Tuple[ParamSpec, ...]
    optional_params: Tuple[ParamSpec, ...]
    response_shape: ShapeSpec

    @property
    def params(self) -> Tuple[ParamSpec, ...]:
        return self.required_params + self.optional_params

    @property
    def result_wrapper(self) -> str:
        """XML element holding the payload, e.g. ``AssumeRoleResult``."""
        return f"{self.name}Result"

    def describe(self) -> Dict[str, Any]:
        """JSON-friendly summary used by the MCP tools."""
        return {
            "name": self.name,
            "required": [p.name for p in self.required_params],
            "optional": [p.name for p in self.optional_params],
            "params": {p.name: p.kind.value for p in self.params},
        }


@dataclass
class Request:
    """One call's worth of input. Built fresh for every call."""

    operation: OperationSpec
    options: Mapping[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass
class Success:
    operation: str
    data: Dict[str, Any]
    request_id: Optional[str] = None
    attempts: int = 1

    ok = True

    def unwrap(self) -> Dict[str, Any]:
        return self.data


@dataclass
class Failure:
    operation: str
    error: StsQueryError
    attempts: int = 0

    ok = False

    def unwrap(self) -> Dict[str, Any]:
        """Raise the carried error."""
        raise self.error


Outcome = Union[Success, Failure]
