"""
Refresh token persistence.

Refresh tokens are opaque random strings; the server keeps one row per token
so a token can be resolved to its owner and revoked individually.
"""
from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError

from models.refresh_token import RefreshToken
from utils.exceptions import PersistenceFailure, TokenExpired, TokenNotFound, TokenRevoked

REFRESH_TOKEN_BYTES = 32


def generate_refresh_token() -> str:
    """256 bits of randomness, hex encoded."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RefreshTokenStore:
    """
    Create, resolve and revoke refresh tokens through a DBStorage.

    Consistency is left to the database: creation is committed before
    create() returns, and revoke() is a single conditional UPDATE.
    """

    def __init__(self, storage):
        self._storage = storage

    def create(self, owner: uuid.UUID, ttl: timedelta) -> RefreshToken:
        record = RefreshToken(
            token=generate_refresh_token(),
            user_id=str(owner),
            expires_at=_now() + ttl,
            revoked_at=None,
        )
        try:
            self._storage.new(record)
            self._storage.save()
        except SQLAlchemyError as exc:
            logging.exception("Could not persist refresh token for user %s", owner)
            raise PersistenceFailure("refresh token insert failed") from exc
        return record

    def resolve_owner(self, token: str) -> uuid.UUID:
        session = self._storage.get_session()
        try:
            record = (
                session.query(RefreshToken)
                .populate_existing()
                .filter(RefreshToken.token == token)
                .first()
            )
        except SQLAlchemyError as exc:
            session.rollback()
            logging.exception("Refresh token lookup failed")
            raise PersistenceFailure("refresh token lookup failed") from exc

        if record is None:
            raise TokenNotFound("refresh token not found")
        if record.revoked_at is not None:
            raise TokenRevoked("refresh token was revoked")
        if _now() >= _as_utc(record.expires_at):
            raise TokenExpired("refresh token expired")
        return uuid.UUID(record.user_id)

    def revoke(self, token: str) -> None:
        """Mark a live token revoked. Unknown or already revoked tokens raise TokenNotFound."""
        session = self._storage.get_session()
        now = _now()
        try:
            rows = (
                session.query(RefreshToken)
                .filter(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
                .update(
                    {RefreshToken.revoked_at: now, RefreshToken.updated_at: now},
                    synchronize_session="fetch",
                )
            )
            self._storage.save()
        except SQLAlchemyError as exc:
            session.rollback()
            logging.exception("Refresh token revoke failed")
            raise PersistenceFailure("refresh token revoke failed") from exc
        if rows == 0:
            raise TokenNotFound("no live refresh token to revoke")
