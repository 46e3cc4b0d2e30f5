"""Password hashing, token signing and request-context resolution."""
from types import SimpleNamespace

import jwt
import pytest

from blog_api.config import settings
from blog_api.middleware import resolve_request_context
from blog_api.security import (
    TokenClaims,
    create_token,
    decode_token,
    hash_password,
    parse_authorization_header,
    verify_password,
)

USER = SimpleNamespace(id=7, name="alice", email="alice@example.com")


def test_hash_and_verify_password():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_rejects_oversized_input():
    hashed = hash_password("short")
    assert not verify_password("x" * 100, hashed)


def test_verify_password_without_hash():
    assert not verify_password("anything", "")


def test_token_round_trip():
    claims = decode_token(create_token(USER))
    assert claims == TokenClaims(id=7, name="alice", email="alice@example.com")


def test_expired_token_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", -5)
    token = create_token(USER)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"id": 1, "name": "x", "email": "x@example.com"}, "a-different-signing-key-of-32-bytes-or-more", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        decode_token(token)


def test_token_without_identity_is_rejected():
    token = jwt.encode({"sub": "1"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(jwt.InvalidTokenError):
        decode_token(token)


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc", "abc"),
        ("Bearer ", None),
        ("Basic dXNlcjpwYXNz", None),
        ("abc.def.ghi", None),
    ],
)
def test_parse_authorization_header(header, expected):
    assert parse_authorization_header(header) == expected


def test_request_context_for_valid_token():
    context = resolve_request_context(f"Bearer {create_token(USER)}")
    assert context.is_authenticated
    assert context.claims.id == 7


@pytest.mark.parametrize("header", [None, "Bearer not-a-token", "Token something"])
def test_request_context_is_anonymous_for_unusable_headers(header):
    context = resolve_request_context(header)
    assert not context.is_authenticated
    assert context.claims is None
