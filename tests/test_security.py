from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from mini_crm.core.config import Settings
from mini_crm.core.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    get_password_hash,
    pwd_context,
    verify_password,
)
from mini_crm.models import UserRole


def test_password_hash_round_trip() -> None:
    digest = get_password_hash("password123")

    assert digest != "password123"
    assert verify_password("password123", digest) is True
    assert verify_password("password124", digest) is False


def test_password_hash_uses_ten_rounds() -> None:
    digest = get_password_hash("password123")

    assert pwd_context.identify(digest) == "bcrypt"
    assert digest.split("$")[2] == "10"


def test_verify_password_rejects_malformed_digest() -> None:
    assert verify_password("password123", "not-a-bcrypt-digest") is False


def test_access_token_carries_user_id_and_role(settings: Settings) -> None:
    generated = create_access_token(user_id=7, role=UserRole.EMPLOYEE, settings=settings)

    claims = decode_access_token(generated.token, settings)

    assert claims.user_id == 7
    assert claims.role is UserRole.EMPLOYEE
    assert generated.expires_in == settings.access_token_expire_minutes * 60

    raw = jwt.decode(generated.token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    assert set(raw) == {"userId", "role", "iat", "exp"}
    assert raw["exp"] - raw["iat"] == 24 * 60 * 60


def test_expired_token_is_rejected(settings: Settings) -> None:
    generated = create_access_token(
        user_id=1,
        role=UserRole.ADMIN,
        settings=settings,
        expires_delta=timedelta(seconds=-5),
    )

    with pytest.raises(InvalidTokenError):
        decode_access_token(generated.token, settings)


def test_token_signed_with_another_secret_is_rejected(settings: Settings) -> None:
    foreign = settings.model_copy(update={"jwt_secret_key": "someone-else"})
    generated = create_access_token(user_id=1, role=UserRole.ADMIN, settings=foreign)

    with pytest.raises(InvalidTokenError):
        decode_access_token(generated.token, settings)


@pytest.mark.parametrize(
    "claims",
    [
        {"role": "ADMIN"},
        {"userId": 1, "role": "SUPERUSER"},
        {"userId": "abc", "role": "EMPLOYEE"},
    ],
)
def test_malformed_claims_are_rejected(settings: Settings, claims: dict) -> None:
    payload = {**claims, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    with pytest.raises(InvalidTokenError):
        decode_access_token(token, settings)


def test_garbage_token_is_rejected(settings: Settings) -> None:
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.token", settings)
