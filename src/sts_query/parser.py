# STS Query Client
# File: parser.py
# Version: v4

"""XML response parser for the Query protocol.

A success body looks like::

    <AssumeRoleResponse xmlns="https://sts.amazonaws.com/doc/2011-06-15/">
      <AssumeRoleResult>...</AssumeRoleResult>
      <ResponseMetadata><RequestId>...</RequestId></ResponseMetadata>
    </AssumeRoleResponse>

and an error body::

    <ErrorResponse>
      <Error><Type>Sender</Type><Code>...</Code><Message>...</Message></Error>
      <RequestId>...</RequestId>
    </ErrorResponse>

Elements present in the body but absent from the declared shape are
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import xml.etree.ElementTree as ET

from .codec import decode_scalar
from .errors import ParseError, ServiceError
from .models import OperationSpec, ParamKind, ShapeSpec


@dataclass
class ParsedResponse:
    data: Dict[str, Any]
    request_id: Optional[str] = None


def _local(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _child(node: ET.Element, name: str) -> Optional[ET.Element]:
    for child in node:
        if _local(child.tag) == name:
            return child
    return None


def _find_text(node: ET.Element, *names: str) -> Optional[str]:
    current: Optional[ET.Element] = node
    for name in names:
        if current is None:
            return None
        current = _child(current, name)
    if current is None:
        return None
    return current.text


def _parse_xml(raw_body: str) -> ET.Element:
    if not raw_body or not raw_body.strip():
        raise ParseError("Empty response body")
    try:
        return ET.fromstring(raw_body)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed XML: {exc}") from exc


# ---------------------------------------------------------------------------
# Shape decoding
# ---------------------------------------------------------------------------


def _decode_node(node: ET.Element, shape: ShapeSpec, path: str) -> Any:
    if shape.kind is ParamKind.STRUCTURE:
        record: Dict[str, Any] = {}
        for field_name, member in shape.members:
            member_path = f"{path}.{field_name}" if path else field_name
            child = _child(node, member.wire_name)
            if child is None:
                if member.required:
                    raise ParseError(
                        f"Missing required element <{member.wire_name}>", member_path
                    )
                continue
            record[field_name] = _decode_node(child, member, member_path)
        return record

    if shape.kind is ParamKind.LIST:
        if shape.member is None:
            raise ParseError("List shape without a member shape", path)
        items: List[Any] = []
        for index, child in enumerate(c for c in node if _local(c.tag) == "member"):
            items.append(_decode_node(child, shape.member, f"{path}[{index}]"))
        return items

    if len(node):
        raise ParseError(
            f"Expected {shape.kind.value} but <{_local(node.tag)}> has child elements",
            path,
        )
    return decode_scalar(node.text, shape.kind, path or "$")


def decode(
    raw_body: str,
    response_shape: ShapeSpec,
    result_wrapper: Optional[str] = None,
) -> Any:
    """Decode ``raw_body`` into a value matching ``response_shape``.

    When ``result_wrapper`` is given the shape is matched against that child
    of the document root (``<AssumeRoleResult>``); otherwise against the
    root itself.
    """
    return _decode_root(_parse_xml(raw_body), raw_body, response_shape, result_wrapper)


def _decode_root(
    root: ET.Element,
    raw_body: str,
    response_shape: ShapeSpec,
    result_wrapper: Optional[str],
) -> Any:
    if _local(root.tag) == "ErrorResponse":
        raise parse_error(raw_body)

    node: Optional[ET.Element] = root
    if result_wrapper:
        node = _child(root, result_wrapper)
        if node is None:
            raise ParseError(f"Missing <{result_wrapper}> element")

    return _decode_node(node, response_shape, "")


def parse_response(raw_body: str, operation: OperationSpec) -> ParsedResponse:
    root = _parse_xml(raw_body)
    data = _decode_root(root, raw_body, operation.response_shape, operation.result_wrapper)
    request_id = _find_text(root, "ResponseMetadata", "RequestId")
    return ParsedResponse(data=data, request_id=request_id)


def parse_error(raw_body: str, status_code: Optional[int] = None) -> ServiceError:
    """Turn an error body into a ``ServiceError``.

    Bodies that are not a recognisable error envelope still produce a
    ``ServiceError`` carrying the HTTP status, so the retry policy can
    classify it.
    """
    try:
        root = _parse_xml(raw_body)
    except ParseError:
        return ServiceError(
            code="HttpError",
            message=f"HTTP {status_code}: {(raw_body or '')[:500]}",
            status_code=status_code,
        )

    error = _child(root, "Error") if _local(root.tag) != "Error" else root
    if error is None:
        return ServiceError(
            code="HttpError",
            message=f"HTTP {status_code}: unrecognised error document <{_local(root.tag)}>",
            status_code=status_code,
        )

    return ServiceError(
        code=(_find_text(error, "Code") or "Unknown").strip(),
        message=(_find_text(error, "Message") or "").strip(),
        request_id=_find_text(root, "RequestId") or _find_text(error, "RequestId"),
        status_code=status_code,
        error_type=_find_text(error, "Type"),
    )
