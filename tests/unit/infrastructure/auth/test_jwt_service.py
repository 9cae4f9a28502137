"""Unit tests for JWTService."""

from datetime import timedelta

import jwt
import pytest

from collabportal.infrastructure.auth import InvalidTokenError, JWTService, TokenExpiredError


@pytest.fixture
def service():
    return JWTService(secret_key="unit-test-secret-key-with-enough-length")


def test_access_token_round_trip(service):
    token = service.create_access_token("user-1", "a@example.com", "admin")

    payload = service.validate_access_token(token)

    assert payload["user_id"] == "user-1"
    assert payload["sub"] == "user-1"
    assert payload["email"] == "a@example.com"
    assert payload["role"] == "admin"


def test_expired_token(service):
    token = service.create_access_token(
        "user-1", "a@example.com", "user", expires_delta=timedelta(seconds=-5)
    )

    with pytest.raises(TokenExpiredError):
        service.validate_access_token(token)


def test_token_signed_with_other_key(service):
    token = JWTService(secret_key="another-secret-key-entirely-different").create_access_token(
        "user-1", "a@example.com", "user"
    )

    with pytest.raises(InvalidTokenError):
        service.validate_access_token(token)


def test_non_access_token_rejected(service):
    token = jwt.encode(
        {"iss": JWTService.ISSUER, "sub": "user-1", "type": "refresh"},
        service.secret_key,
        algorithm=JWTService.ALGORITHM,
    )

    with pytest.raises(InvalidTokenError, match="Not an access token"):
        service.validate_access_token(token)
