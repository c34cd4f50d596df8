# STS Query Client
# File: codec.py
# Version: v4

"""Parameter codec for the Query protocol.

Caller options are nested Python values keyed by snake_case names. The wire
format is a flat set of string pairs:

- scalars:     ``DurationSeconds=3600``
- lists:       ``Tags.member.1=a``, ``Tags.member.2=b``
- structures:  ``Tag.Key=env``, ``Tag.Value=prod``

``encode`` always returns keys in sorted order so the same options produce
the same signed body.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from .errors import (
    InvalidParameterType,
    MissingRequiredParameter,
    ParseError,
    UnknownParameter,
)
from .models import OperationSpec, ParamKind, ParamSpec

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_TRUE_STRINGS = {"true", "1"}
_FALSE_STRINGS = {"false", "0"}


def encode(options: Mapping[str, Any] | None, operation: OperationSpec) -> Dict[str, str]:
    """Validate ``options`` against ``operation`` and flatten them."""
    options = dict(options or {})

    known = {p.name for p in operation.params}
    for name in sorted(options):
        if name not in known:
            raise UnknownParameter(name, f"operation {operation.name}")

    for param in operation.required_params:
        if options.get(param.name) is None:
            raise MissingRequiredParameter(param.name)

    pairs: List[Tuple[str, str]] = []
    for param in operation.params:
        value = options.get(param.name)
        if value is None:
            continue
        pairs.extend(_flatten(param, value, param.wire_name, param.name))

    return dict(sorted(pairs))


def _flatten(param: ParamSpec, value: Any, prefix: str, path: str) -> List[Tuple[str, str]]:
    if param.kind is ParamKind.LIST:
        if not isinstance(value, (list, tuple)):
            raise InvalidParameterType(path, "list", type(value).__name__)
        if param.member is None:
            raise InvalidParameterType(path, "list with member spec", "undeclared member")

        out: List[Tuple[str, str]] = []
        for index, item in enumerate(value, start=1):
            out.extend(
                _flatten(
                    param.member,
                    item,
                    f"{prefix}.member.{index}",
                    f"{path}[{index - 1}]",
                )
            )
        return out

    if param.kind is ParamKind.STRUCTURE:
        if not isinstance(value, Mapping):
            raise InvalidParameterType(path, "mapping", type(value).__name__)

        fields = {m.name: m for m in param.members}
        for key in value:
            if key not in fields:
                raise UnknownParameter(f"{path}.{key}", f"structure '{path}'")

        out = []
        for member in param.members:
            member_value = value.get(member.name)
            member_path = f"{path}.{member.name}"
            if member_value is None:
                if member.required:
                    raise MissingRequiredParameter(member_path)
                continue
            out.extend(
                _flatten(member, member_value, f"{prefix}.{member.wire_name}", member_path)
            )
        return out

    return [(prefix, encode_scalar(value, param.kind, path))]


def encode_scalar(value: Any, kind: ParamKind, path: str = "$") -> str:
    """Serialize one scalar to its canonical wire string."""
    if kind is ParamKind.STRING:
        if not isinstance(value, str):
            raise InvalidParameterType(path, "string", type(value).__name__)
        return value

    if kind is ParamKind.INTEGER:
        # bool is an int subclass but never a valid integer parameter.
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterType(path, "integer", type(value).__name__)
        return str(value)

    if kind is ParamKind.BOOLEAN:
        if not isinstance(value, bool):
            raise InvalidParameterType(path, "boolean", type(value).__name__)
        return "true" if value else "false"

    if kind is ParamKind.TIMESTAMP:
        if not isinstance(value, datetime):
            raise InvalidParameterType(path, "timestamp", type(value).__name__)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)

    raise InvalidParameterType(path, "scalar", kind.value)


def decode_scalar(text: str | None, kind: ParamKind, path: str = "$") -> Any:
    """Inverse of ``encode_scalar`` used by the response parser."""
    raw = (text or "").strip()

    if kind is ParamKind.STRING:
        return text or ""

    if kind is ParamKind.INTEGER:
        try:
            return int(raw)
        except ValueError:
            raise ParseError(f"Expected integer, got {raw!r}", path) from None

    if kind is ParamKind.BOOLEAN:
        lowered = raw.lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ParseError(f"Expected boolean, got {raw!r}", path)

    if kind is ParamKind.TIMESTAMP:
        return parse_timestamp(raw, path)

    raise ParseError(f"Cannot decode {kind.value} as a scalar", path)


def parse_timestamp(raw: str, path: str = "$") -> datetime:
    """Parse an ISO 8601 timestamp such as ``2011-07-15T23:28:33.359Z``."""
    candidate = raw.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    # fromisoformat on older interpreters only accepts 3 or 6 fraction digits.
    if "." in candidate:
        head, _, tail = candidate.partition(".")
        digits = ""
        while tail and tail[0].isdigit():
            digits, tail = digits + tail[0], tail[1:]
        candidate = f"{head}.{(digits + '000000')[:6]}{tail}"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        raise ParseError(f"Expected timestamp, got {raw!r}", path) from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
