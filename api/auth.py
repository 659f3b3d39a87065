"""
Authentication blueprint:
- POST /login    -> user profile + access token + refresh token
- POST /refresh  -> new access token for a live refresh token
- POST /revoke   -> revoke a refresh token

The implementation:
- Uses argon2 for password verification (via utils.security)
- Issues short-lived HS256 access tokens (1 hour)
- Stores opaque refresh tokens in the DB (RefreshToken model) so they can be revoked
"""
from __future__ import annotations

import logging
import uuid

from flask import Blueprint, request, jsonify

from api.errors import AuthenticationError
from models import storage
from models.user import User
from models.schemas.user import UserLoginSchema, UserOutSchema
from utils.exceptions import HashingFailure
from utils.security import verify_password
from utils.sessions import issue_session, refresh_session, end_session

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()

INVALID_LOGIN = "Incorrect email or password"


@bp.post("/login")
def login():
    """
    Login: return the user with token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    session = storage.get_session()
    user: User = session.query(User).filter(User.email == data["email"]).first()
    if not user:
        logging.info("Login failed: unknown email")
        raise AuthenticationError(INVALID_LOGIN)

    try:
        matches = verify_password(data["password"], user.hashed_password)
    except HashingFailure:
        logging.exception("Stored password hash for user %s is unreadable", user.id)
        matches = False
    if not matches:
        logging.info("Login failed: password mismatch for user %s", user.id)
        raise AuthenticationError(INVALID_LOGIN)

    access_token, refresh_token = issue_session(uuid.UUID(user.id))
    out = user_out_schema.dump(user)
    out["token"] = access_token
    out["refresh_token"] = refresh_token
    return jsonify(out), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns token)
      401:
        description: Unauthorized
    """
    token = refresh_session(request.headers.get("Authorization"))
    return jsonify({"token": token}), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Revoked
      401:
        description: Unauthorized
    """
    end_session(request.headers.get("Authorization"))
    return ("", 204)
