"""Session tokens: issue, verify, reject."""

from datetime import timedelta

import pytest

from app.core.errors import Unauthenticated
from app.database import Settings
from app.utils.security import bearer_token, create_access_token, decode_token

SETTINGS = Settings(jwt_secret="unit-secret", _env_file=None)


def test_round_trip_carries_identity_claims():
    token = create_access_token("a@example.com", "volunteer", "Alice", settings=SETTINGS)
    claims = decode_token(token, settings=SETTINGS)
    assert claims["email"] == "a@example.com"
    assert claims["sub"] == "a@example.com"
    assert claims["role"] == "volunteer"
    assert claims["name"] == "Alice"


def test_default_expiry_is_seven_days():
    assert SETTINGS.jwt_expires_min == 7 * 24 * 60


def test_expired_token_is_rejected():
    token = create_access_token("a@example.com", "donor", expires_delta=timedelta(seconds=-5), settings=SETTINGS)
    with pytest.raises(Unauthenticated, match="expired"):
        decode_token(token, settings=SETTINGS)


def test_token_signed_with_another_secret_is_rejected():
    other = Settings(jwt_secret="other-secret", _env_file=None)
    token = create_access_token("a@example.com", "donor", settings=other)
    with pytest.raises(Unauthenticated):
        decode_token(token, settings=SETTINGS)


def test_garbage_token_is_rejected():
    with pytest.raises(Unauthenticated):
        decode_token("not-a-jwt", settings=SETTINGS)


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer ", "Bearer"])
def test_bearer_token_requires_bearer_scheme(header):
    with pytest.raises(Unauthenticated):
        bearer_token(header)


def test_bearer_token_extracts_token():
    assert bearer_token("Bearer abc.def") == "abc.def"
