# STS Query Client
# File: sts.py
# Version: v2

"""Operation catalog for the AWS Security Token Service.

Pure data: every operation is a set of parameter specs plus a response
shape. Behaviour lives in the dispatcher.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from .catalog import OperationCatalog
from .errors import ConfigurationError
from .models import ParamKind, ParamSpec, ShapeSpec

SERVICE_NAME = "sts"
API_VERSION_2011_06_15 = "2011-06-15"

STR = ParamKind.STRING
INT = ParamKind.INTEGER


def _req(name: str, wire_name: str, kind: ParamKind = STR) -> ParamSpec:
    return ParamSpec(name=name, wire_name=wire_name, kind=kind, required=True)


def _opt(name: str, wire_name: str, kind: ParamKind = STR) -> ParamSpec:
    return ParamSpec(name=name, wire_name=wire_name, kind=kind)


def _scalar(wire_name: str, kind: ParamKind = STR, required: bool = False) -> ShapeSpec:
    return ShapeSpec(kind=kind, wire_name=wire_name, required=required)


def _struct(wire_name: str, required: bool = False, **members: ShapeSpec) -> ShapeSpec:
    return ShapeSpec(
        kind=ParamKind.STRUCTURE,
        wire_name=wire_name,
        required=required,
        members=tuple(members.items()),
    )


# Response building blocks shared by several operations.
CREDENTIALS = _struct(
    "Credentials",
    access_key_id=_scalar("AccessKeyId", required=True),
    secret_access_key=_scalar("SecretAccessKey", required=True),
    session_token=_scalar("SessionToken", required=True),
    expiration=_scalar("Expiration", ParamKind.TIMESTAMP, required=True),
)

ASSUMED_ROLE_USER = _struct(
    "AssumedRoleUser",
    assumed_role_id=_scalar("AssumedRoleId", required=True),
    arn=_scalar("Arn", required=True),
)

FEDERATED_USER = _struct(
    "FederatedUser",
    federated_user_id=_scalar("FederatedUserId", required=True),
    arn=_scalar("Arn", required=True),
)

PACKED_POLICY_SIZE = _scalar("PackedPolicySize", INT)


def build_v20110615() -> OperationCatalog:
    catalog = OperationCatalog(SERVICE_NAME, API_VERSION_2011_06_15)

    catalog.register(
        "AssumeRole",
        required_params=[
            _req("role_arn", "RoleArn"),
            _req("role_session_name", "RoleSessionName"),
        ],
        optional_params=[
            _opt("policy", "Policy"),
            _opt("duration_seconds", "DurationSeconds", INT),
            _opt("external_id", "ExternalId"),
        ],
        response_shape=_struct(
            "AssumeRoleResult",
            credentials=CREDENTIALS,
            assumed_role_user=ASSUMED_ROLE_USER,
            packed_policy_size=PACKED_POLICY_SIZE,
        ),
    )

    catalog.register(
        "AssumeRoleWithWebIdentity",
        required_params=[
            _req("role_arn", "RoleArn"),
            _req("role_session_name", "RoleSessionName"),
            _req("web_identity_token", "WebIdentityToken"),
        ],
        optional_params=[
            _opt("provider_id", "ProviderId"),
            _opt("policy", "Policy"),
            _opt("duration_seconds", "DurationSeconds", INT),
        ],
        response_shape=_struct(
            "AssumeRoleWithWebIdentityResult",
            credentials=CREDENTIALS,
            subject_from_web_identity_token=_scalar("SubjectFromWebIdentityToken"),
            assumed_role_user=ASSUMED_ROLE_USER,
            packed_policy_size=PACKED_POLICY_SIZE,
        ),
    )

    catalog.register(
        "DecodeAuthorizationMessage",
        required_params=[_req("encoded_message", "EncodedMessage")],
        response_shape=_struct(
            "DecodeAuthorizationMessageResult",
            decoded_message=_scalar("DecodedMessage"),
        ),
    )

    catalog.register(
        "GetFederationToken",
        required_params=[_req("name", "Name")],
        optional_params=[
            _opt("policy", "Policy"),
            _opt("duration_seconds", "DurationSeconds", INT),
        ],
        response_shape=_struct(
            "GetFederationTokenResult",
            credentials=CREDENTIALS,
            federated_user=FEDERATED_USER,
            packed_policy_size=PACKED_POLICY_SIZE,
        ),
    )

    catalog.register(
        "GetSessionToken",
        optional_params=[
            _opt("duration_seconds", "DurationSeconds", INT),
            _opt("serial_number", "SerialNumber"),
            _opt("token_code", "TokenCode"),
        ],
        response_shape=_struct("GetSessionTokenResult", credentials=CREDENTIALS),
    )

    return catalog.freeze()


CATALOG_BUILDERS: Dict[str, Callable[[], OperationCatalog]] = {
    API_VERSION_2011_06_15: build_v20110615,
}


def supported_api_versions() -> List[str]:
    return sorted(CATALOG_BUILDERS)


def build_catalog(api_version: str) -> OperationCatalog:
    """Build the frozen catalog for ``api_version``."""
    builder = CATALOG_BUILDERS.get(api_version)
    if builder is None:
        raise ConfigurationError(
            f"Unsupported STS API version '{api_version}'. "
            f"Supported: {', '.join(supported_api_versions())}."
        )
    return builder()
