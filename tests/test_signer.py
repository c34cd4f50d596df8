# STS Query Client
# File: tests/test_signer.py
# Version: v2

from __future__ import annotations

from datetime import datetime, timezone

from sts_query.signer import Credentials, SigV4Signer

FIXED = datetime(2013, 8, 5, 12, 0, 0, tzinfo=timezone.utc)
CREDS = Credentials("AKIDEXAMPLE", "wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY")
URL = "https://sts.amazonaws.com/"
HEADERS = {"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"}
BODY = b"Action=GetSessionToken&Version=2011-06-15"


def _signer(creds: Credentials = CREDS) -> SigV4Signer:
    return SigV4Signer(credentials=creds, region="us-east-1", service="sts", clock=lambda: FIXED)


def test_signing_key_matches_published_example():
    signer = SigV4Signer(credentials=CREDS, region="us-east-1", service="iam")

    assert signer.signing_key("20120215").hex() == (
        "f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d"
    )


def test_sign_adds_date_host_and_authorization():
    headers = _signer().sign("POST", URL, HEADERS, BODY)

    assert headers["X-Amz-Date"] == "20130805T120000Z"
    assert headers["Host"] == "sts.amazonaws.com"
    auth = headers["Authorization"]
    assert auth.startswith("AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20130805/us-east-1/sts/aws4_request, ")
    assert "SignedHeaders=content-type;host;x-amz-date, " in auth
    assert "X-Amz-Security-Token" not in headers


def test_signature_is_deterministic_and_body_sensitive():
    first = _signer().sign("POST", URL, HEADERS, BODY)["Authorization"]
    second = _signer().sign("POST", URL, HEADERS, BODY)["Authorization"]
    other = _signer().sign("POST", URL, HEADERS, BODY + b"&DurationSeconds=900")["Authorization"]

    assert first == second
    assert first != other


def test_session_token_is_signed():
    creds = Credentials("AKIDEXAMPLE", "secret", session_token="token123")
    headers = _signer(creds).sign("POST", URL, HEADERS, BODY)

    assert headers["X-Amz-Security-Token"] == "token123"
    assert "SignedHeaders=content-type;host;x-amz-date;x-amz-security-token, " in headers["Authorization"]


def test_credentials_repr_hides_secret():
    assert "wJalr" not in repr(CREDS)


def test_credentials_from_env(monkeypatch):
    assert Credentials.from_env() is None

    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKID")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "tok")

    creds = Credentials.from_env()
    assert creds == Credentials("AKID", "secret", "tok")


# Cases from the AWS Signature Version 4 test suite (service "service",
# 2015-08-30T12:36:00Z, AKIDEXAMPLE credentials).
SUITE_TIME = datetime(2015, 8, 30, 12, 36, 0, tzinfo=timezone.utc)
SUITE_URL = "https://example.amazonaws.com/"


def _suite_signer() -> SigV4Signer:
    return SigV4Signer(credentials=CREDS, region="us-east-1", service="service", clock=lambda: SUITE_TIME)


def test_authorization_matches_suite_get_vanilla():
    headers = _suite_signer().sign("GET", SUITE_URL, {}, b"")

    assert headers["Authorization"] == (
        "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20150830/us-east-1/service/aws4_request, "
        "SignedHeaders=host;x-amz-date, "
        "Signature=5fa00fa31553b73ebf1942676e86291e8372ff2a2260956d9b8aae1d763fbf31"
    )


def test_authorization_matches_suite_form_post():
    headers = _suite_signer().sign(
        "POST",
        SUITE_URL,
        {"Content-Type": "application/x-www-form-urlencoded"},
        b"Param1=value1",
    )

    assert headers["Authorization"] == (
        "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20150830/us-east-1/service/aws4_request, "
        "SignedHeaders=content-type;host;x-amz-date, "
        "Signature=ff11897932ad3f4e8b18135d722051e5ac45fc38421b1da7b9d196a0fe09473a"
    )
