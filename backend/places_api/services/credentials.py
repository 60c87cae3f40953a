"""Password hashing and session token helpers.

Passwords are hashed with scrypt and a per-password random salt.
Session tokens are HS256 JWTs carrying the user id (``sub``), email,
issue time and expiry; nothing about a session is stored server side.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from places_api.config import settings
from places_api.errors import TokenInvalid

_SALT_BYTES = 16
_KEY_LEN = 32
_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1


@dataclass(frozen=True)
class TokenClaims:
    """Decoded contents of a session token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


def _encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")


def _decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def hash_password(password: str) -> str:
    """Hash ``password`` using scrypt with a random salt."""

    if not password or not password.strip():
        msg = "Password must not be empty"
        raise ValueError(msg)

    salt = secrets.token_bytes(_SALT_BYTES)
    key = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LEN,
    )
    return f"scrypt${_SCRYPT_N}${_SCRYPT_R}${_SCRYPT_P}${_encode(salt)}${_encode(key)}"


def verify_password(password: str, hashed: str) -> bool:
    """Return ``True`` if ``password`` matches ``hashed``."""

    try:
        scheme, n_str, r_str, p_str, salt_b64, key_b64 = hashed.split("$", 5)
        if scheme != "scrypt":
            return False
        n = int(n_str)
        r = int(r_str)
        p = int(p_str)
        salt = _decode(salt_b64)
        expected = _decode(key_b64)
    except (ValueError, TypeError, AttributeError):
        return False

    try:
        candidate = hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=n,
            r=r,
            p=p,
            dklen=len(expected),
        )
    except ValueError:
        return False

    return secrets.compare_digest(candidate, expected)


def issue_token(
    user_id: int,
    email: str,
    *,
    expires_in: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> str:
    """Return a signed session token for the supplied identity.

    ``expires_in`` defaults to ``settings.token_expire_minutes``; ``now``
    exists so callers can mint tokens at a fixed point in time.
    """

    issued = now or datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(minutes=settings.token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": int(issued.timestamp()),
        "exp": int((issued + lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenClaims:
    """Decode ``token`` and return its claims.

    Raises ``TokenInvalid`` for a bad signature, a malformed payload or
    an expired token.
    """

    try:
        data = jwt.decode(
            token,
            settings.jwt_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenInvalid("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise TokenInvalid(f"Token rejected: {exc}") from exc

    try:
        return TokenClaims(
            user_id=int(data["sub"]),
            email=str(data.get("email", "")),
            issued_at=datetime.fromtimestamp(int(data["iat"]), tz=timezone.utc),
            expires_at=datetime.fromtimestamp(int(data["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise TokenInvalid("Token payload is malformed") from exc
