from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g

from api.errors import ConflictError, InternalError, NotFoundError
from models import storage
from models.user import User
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.decorators import jwt_required
from utils.exceptions import HashingFailure
from utils.security import hash_password

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()


def _hash_or_fail(password: str) -> str:
    try:
        return hash_password(password)
    except HashingFailure as exc:
        logging.exception("Error hashing password")
        raise InternalError() from exc


def _email_taken(email: str, exclude_id: str | None = None) -> bool:
    query = storage.get_session().query(User).filter(User.email == email)
    if exclude_id:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


@bp.post("/users")
def create_user():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if _email_taken(data["email"]):
        raise ConflictError("Email already registered")

    user = User(email=data["email"], hashed_password=_hash_or_fail(data["password"]))
    storage.new(user)
    storage.save()

    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_user():
    """
    Replace the current user's email and password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK
      400:
        description: Validation error
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    user_id = str(g.current_user_id)
    user = storage.get(User, user_id)
    if not user:
        # token outlived its user
        raise NotFoundError("User not found")
    if _email_taken(data["email"], exclude_id=user_id):
        raise ConflictError("Email already registered")

    user.email = data["email"]
    user.hashed_password = _hash_or_fail(data["password"])
    user.save()

    return jsonify(user_out_schema.dump(user)), 200
