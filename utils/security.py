"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT (HS256 only)
- Constant-time API key comparison
"""
from __future__ import annotations

import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping, Union

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from utils.exceptions import ExpiredToken, HashingFailure, InvalidToken, SigningFailure

DEFAULT_ISSUER = "chirpy"

# Exactly one accepted signing algorithm; the token header is never trusted.
ALLOWED_ALGORITHMS = ("HS256",)
REQUIRED_CLAIMS = ["exp", "iat", "sub", "iss"]

Secret = Union[str, bytes]

ph = PasswordHasher()


def configure_password_hasher(config: Mapping) -> PasswordHasher:
    """Rebuild the module hasher from ARGON2_* settings.
    """
    global ph
    ph = PasswordHasher(
        time_cost=int(config.get("ARGON2_TIME_COST", ph.time_cost)),
        memory_cost=int(config.get("ARGON2_MEMORY_COST", ph.memory_cost)),
        parallelism=int(config.get("ARGON2_PARALLELISM", ph.parallelism)),
    )
    return ph


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2id.

    The result is a PHC string carrying algorithm, parameters, salt and digest.
    """
    try:
        return ph.hash(password)
    except HashingError as exc:
        raise HashingFailure("argon2 hashing failed") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored Argon2 record.

    Returns False on mismatch; raises HashingFailure when the record is unreadable.
    """
    try:
        return ph.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as exc:
        raise HashingFailure("stored password hash is malformed") from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _key(secret: Secret) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def make_jwt(
    subject: uuid.UUID,
    secret: Secret,
    expires_in: timedelta,
    issuer: str = DEFAULT_ISSUER,
) -> str:
    """Issue an HS256 access token for subject valid for expires_in.
    """
    issued_at = _now()
    payload = {
        "iss": issuer,
        "sub": str(subject),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    try:
        return jwt.encode(payload, _key(secret), algorithm=ALLOWED_ALGORITHMS[0])
    except (jwt.PyJWTError, TypeError, ValueError) as exc:
        raise SigningFailure("could not sign access token") from exc


def validate_jwt(token: str, secret: Secret, issuer: str = DEFAULT_ISSUER) -> uuid.UUID:
    """
    Decode and validate an access token and return its subject.
    Raises ExpiredToken past expiry and InvalidToken for anything else.
    """
    try:
        header = jwt.get_unverified_header(token)
    except jwt.PyJWTError as exc:
        raise InvalidToken(f"unreadable token header: {exc}") from exc

    if header.get("alg") not in ALLOWED_ALGORITHMS:
        raise InvalidToken(f"unexpected signing method: {header.get('alg')!r}")

    try:
        claims = jwt.decode(
            token,
            _key(secret),
            algorithms=list(ALLOWED_ALGORITHMS),
            issuer=issuer,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredToken("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(f"invalid token: {exc}") from exc

    try:
        return uuid.UUID(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidToken("subject is not a valid id") from exc


def check_api_key(presented: str, configured: str) -> bool:
    """Compare a presented API key against the configured one in constant time.
    """
    if not configured:
        logging.warning("API key check attempted with no key configured")
        return False
    return hmac.compare_digest(presented.encode("utf-8"), configured.encode("utf-8"))
