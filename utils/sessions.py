"""
Session lifecycle used by the auth views.

Every credential failure surfaces as a bare AuthenticationError ("Unauthorized")
whatever the cause; the cause itself only goes to the log.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional, Tuple

from flask import current_app

from api.errors import AuthenticationError, InternalError
from models import storage
from utils.exceptions import (
    AuthError,
    HashingFailure,
    MissingCredential,
    MalformedCredential,
    PersistenceFailure,
    SigningFailure,
)
from utils.headers import get_api_key, get_bearer_token
from utils.security import check_api_key, make_jwt, validate_jwt
from utils.tokens import RefreshTokenStore

_INTERNAL_FAILURES = (HashingFailure, SigningFailure, PersistenceFailure)


def _unauthorized(reason: AuthError) -> AuthenticationError:
    logging.info("Rejected credential: %s (%s)", reason.__class__.__name__, reason)
    return AuthenticationError()


def _internal(cause: AuthError) -> InternalError:
    logging.error("Auth internal failure: %s (%s)", cause.__class__.__name__, cause)
    return InternalError()


def refresh_token_store() -> RefreshTokenStore:
    return RefreshTokenStore(storage)


def new_access_token(user_id: uuid.UUID) -> str:
    cfg = current_app.config
    try:
        return make_jwt(user_id, cfg["JWT_SECRET"], cfg["ACCESS_TOKEN_EXPIRES"], issuer=cfg["JWT_ISSUER"])
    except SigningFailure as exc:
        raise _internal(exc) from exc


def issue_session(user_id: uuid.UUID) -> Tuple[str, str]:
    """Mint an access token and persist a fresh refresh token for user_id."""
    access_token = new_access_token(user_id)
    try:
        record = refresh_token_store().create(user_id, current_app.config["REFRESH_TOKEN_EXPIRES"])
    except PersistenceFailure as exc:
        raise _internal(exc) from exc
    return access_token, record.token


def authenticate(header_value: Optional[str]) -> uuid.UUID:
    """Resolve a 'Bearer <access token>' header to the caller's id.

    The user row is not consulted: a deleted user's token stays valid until it expires.
    """
    cfg = current_app.config
    try:
        token = get_bearer_token(header_value)
        return validate_jwt(token, cfg["JWT_SECRET"], issuer=cfg["JWT_ISSUER"])
    except AuthError as exc:
        raise _unauthorized(exc) from exc


def refresh_session(header_value: Optional[str]) -> str:
    """Exchange a 'Bearer <refresh token>' header for a new access token."""
    try:
        token = get_bearer_token(header_value)
        user_id = refresh_token_store().resolve_owner(token)
    except _INTERNAL_FAILURES as exc:
        raise _internal(exc) from exc
    except AuthError as exc:
        raise _unauthorized(exc) from exc
    return new_access_token(user_id)


def end_session(header_value: Optional[str]) -> None:
    """Revoke the refresh token carried in a 'Bearer <refresh token>' header."""
    try:
        token = get_bearer_token(header_value)
        refresh_token_store().revoke(token)
    except _INTERNAL_FAILURES as exc:
        raise _internal(exc) from exc
    except AuthError as exc:
        raise _unauthorized(exc) from exc


def verify_server_callback(header_value: Optional[str]) -> bool:
    """True when an 'ApiKey <key>' header matches the configured POLKA_KEY."""
    try:
        presented = get_api_key(header_value)
    except (MissingCredential, MalformedCredential) as exc:
        logging.info("Rejected API key: %s", exc)
        return False
    if not check_api_key(presented, current_app.config.get("POLKA_KEY", "")):
        logging.info("Rejected API key: value does not match")
        return False
    return True
