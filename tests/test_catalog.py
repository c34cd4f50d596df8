# STS Query Client
# File: tests/test_catalog.py
# Version: v1

from __future__ import annotations

import pytest

from sts_query.catalog import OperationCatalog
from sts_query.errors import CatalogError, ConfigurationError, UnknownOperationError
from sts_query.models import ParamKind, ParamSpec, ShapeSpec
from sts_query.sts import build_catalog, supported_api_versions

SHAPE = ShapeSpec(kind=ParamKind.STRUCTURE, wire_name="PingResult")


def test_register_and_lookup():
    catalog = OperationCatalog("demo", "2020-01-01")
    spec = catalog.register(
        "Ping",
        required_params=[ParamSpec("target", "Target", required=True)],
        optional_params=[ParamSpec("count", "Count", ParamKind.INTEGER)],
        response_shape=SHAPE,
    )

    assert catalog.lookup("Ping") is spec
    assert [p.name for p in spec.required_params] == ["target"]
    assert [p.name for p in spec.optional_params] == ["count"]
    assert spec.result_wrapper == "PingResult"


def test_lookup_unknown_operation():
    catalog = OperationCatalog("demo", "2020-01-01").freeze()

    with pytest.raises(UnknownOperationError) as excinfo:
        catalog.lookup("Nope")
    assert excinfo.value.operation == "Nope"


def test_frozen_catalog_rejects_registration():
    catalog = OperationCatalog("demo", "2020-01-01").freeze()

    with pytest.raises(CatalogError):
        catalog.register("Ping", response_shape=SHAPE)


def test_duplicate_operation_rejected():
    catalog = OperationCatalog("demo", "2020-01-01")
    catalog.register("Ping", response_shape=SHAPE)

    with pytest.raises(CatalogError):
        catalog.register("Ping", response_shape=SHAPE)


def test_required_flag_must_match_list():
    catalog = OperationCatalog("demo", "2020-01-01")

    with pytest.raises(CatalogError):
        catalog.register(
            "Ping",
            optional_params=[ParamSpec("target", "Target", required=True)],
            response_shape=SHAPE,
        )


def test_operations_view_is_read_only():
    catalog = build_catalog("2011-06-15")

    with pytest.raises(TypeError):
        catalog.operations["Evil"] = None  # type: ignore[index]


def test_sts_catalog_contents():
    catalog = build_catalog("2011-06-15")

    assert catalog.frozen
    assert catalog.names() == [
        "AssumeRole",
        "AssumeRoleWithWebIdentity",
        "DecodeAuthorizationMessage",
        "GetFederationToken",
        "GetSessionToken",
    ]

    assume_role = catalog.lookup("AssumeRole")
    assert {p.name for p in assume_role.required_params} == {"role_arn", "role_session_name"}
    assert {p.name for p in assume_role.optional_params} == {"policy", "duration_seconds", "external_id"}

    get_session_token = catalog.lookup("GetSessionToken")
    assert get_session_token.required_params == ()


def test_unsupported_api_version():
    assert supported_api_versions() == ["2011-06-15"]
    with pytest.raises(ConfigurationError):
        build_catalog("1999-01-01")
