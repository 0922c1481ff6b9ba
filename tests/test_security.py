"""Tests for the static bearer token check."""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from mapprism.api.security import verify_api_token
from mapprism.exceptions import AuthenticationError, ErrorKind
from mapprism.settings import Settings

from helpers import TEST_TOKEN


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_accepts_configured_token():
    verify_api_token(Settings(api_token=TEST_TOKEN), bearer(TEST_TOKEN))


def test_missing_header_is_authentication_error():
    with pytest.raises(AuthenticationError, match="Missing or invalid Authorization header") as e:
        verify_api_token(Settings(api_token=TEST_TOKEN), None)
    assert e.value.kind == ErrorKind.AUTHENTICATION


def test_wrong_token_is_authentication_error():
    with pytest.raises(AuthenticationError, match="Invalid token"):
        verify_api_token(Settings(api_token=TEST_TOKEN), bearer("nope"))


def test_unconfigured_token_is_server_error():
    with pytest.raises(HTTPException) as e:
        verify_api_token(Settings(api_token=""), bearer("anything"))
    assert e.value.status_code == 500
    assert e.value.detail == "Server configuration error"
