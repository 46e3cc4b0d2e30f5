"""Password hashing (bcrypt) and bearer token signing (PyJWT)."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from blog_api.config import settings


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a bearer token."""

    id: int
    name: str
    email: str


def hash_password(raw_password: str) -> str:
    hashed = bcrypt.hashpw(raw_password.encode(), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode()


def verify_password(raw_password: str, password_hash: str) -> bool:
    raw = raw_password.encode()
    # Nothing longer than 72 bytes can have been hashed (see schemas.Password).
    if not password_hash or len(raw) > 72:
        return False
    return bcrypt.checkpw(raw, password_hash.encode("utf-8"))


def create_token(user) -> str:
    """Sign a token carrying the user's id, name and email."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> TokenClaims:
    """
    Verify *token* and return its claims.

    Raises ``jwt.InvalidTokenError`` (or a subclass such as
    ``ExpiredSignatureError``) when the token cannot be trusted or does
    not carry an identity.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    try:
        return TokenClaims(
            id=int(payload["id"]),
            name=str(payload["name"]),
            email=str(payload["email"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("Token does not carry a user identity") from exc


def parse_authorization_header(value: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` value."""
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
