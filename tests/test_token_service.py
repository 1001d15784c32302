"""Tests for JWT issuing and verification."""

import uuid
from datetime import timedelta

import pytest

from hotel_cms.core.settings import Settings
from hotel_cms.services.token_service import (
    ACCESS_TOKEN_TYPE,
    TokenExpiredError,
    TokenInvalidError,
    TokenService,
)


@pytest.fixture
def tokens():
    return TokenService(Settings(jwt_secret_key="access-secret", jwt_refresh_secret_key="refresh-secret"))


def test_issue_and_verify(tokens: TokenService):
    user_id = uuid.uuid4()
    website_id = uuid.uuid4()

    pair = tokens.issue(user_id, "admin", website_id)

    access = tokens.verify_access(pair.access_token)
    assert access.user_id == user_id
    assert access.role == "admin"
    assert access.website_id == website_id
    assert access.token_type == "access"

    refresh = tokens.verify_refresh(pair.refresh_token)
    assert refresh.user_id == user_id
    assert refresh.token_type == "refresh"

    assert pair.to_dict()["tokenType"] == "bearer"
    assert pair.expires_in == tokens.settings.jwt_access_token_expire_minutes * 60


def test_super_admin_token_has_no_scope(tokens: TokenService):
    pair = tokens.issue(uuid.uuid4(), "super_admin")

    assert tokens.verify_access(pair.access_token).website_id is None


def test_token_types_are_not_interchangeable(tokens: TokenService):
    pair = tokens.issue(uuid.uuid4(), "admin")

    with pytest.raises(TokenInvalidError):
        tokens.verify_access(pair.refresh_token)
    with pytest.raises(TokenInvalidError):
        tokens.verify_refresh(pair.access_token)


def test_expired_token(tokens: TokenService):
    token = tokens._encode(uuid.uuid4(), "admin", None, ACCESS_TOKEN_TYPE, timedelta(seconds=-1))

    with pytest.raises(TokenExpiredError):
        tokens.verify_access(token)


def test_foreign_signature_rejected(tokens: TokenService):
    other = TokenService(Settings(jwt_secret_key="someone-else", jwt_refresh_secret_key="x"))
    pair = other.issue(uuid.uuid4(), "admin")

    with pytest.raises(TokenInvalidError):
        tokens.verify_access(pair.access_token)


def test_garbage_rejected(tokens: TokenService):
    with pytest.raises(TokenInvalidError):
        tokens.verify_access("abc.def.ghi")
