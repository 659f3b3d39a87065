from __future__ import annotations

import uuid

from flask import Blueprint, request, jsonify, g

from api.errors import AuthorizationError, NotFoundError, ValidationError
from models import storage
from models.chirp import Chirp
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from utils.decorators import jwt_required

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)

PROFANE_WORDS = {"kerfuffle", "sharbert", "fornax"}
CENSORED = "****"

SORT_ORDERS = {
    "asc": Chirp.created_at.asc(),
    "desc": Chirp.created_at.desc(),
}


def clean_body(body: str) -> str:
    """Mask profane words. Only whole space-separated words match, so 'Sharbert!' survives."""
    words = body.split(" ")
    return " ".join(CENSORED if w.lower() in PROFANE_WORDS else w for w in words)


def parse_uuid(value: str, name: str) -> str:
    try:
        return str(uuid.UUID(value))
    except (ValueError, TypeError):
        raise ValidationError(f"Invalid {name}") from None


def parse_sort():
    # Only "desc" reverses; anything else lists oldest first
    sort = request.args.get("sort", "asc").lower()
    return SORT_ORDERS.get(sort, SORT_ORDERS["asc"])


@bp.url_value_preprocessor
def check_chirp_id(endpoint, values):
    """Reject a malformed chirp id with 400 before any auth check runs."""
    if values and "chirp_id" in values:
        values["chirp_id"] = parse_uuid(values["chirp_id"], "chirp id")


def get_chirp_or_404(chirp_id: str) -> Chirp:
    chirp = storage.get(Chirp, chirp_id)
    if not chirp:
        raise NotFoundError("Chirp not found")
    return chirp


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the current user
    ---
    tags:
      - Chirps
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
            body: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error (e.g. chirp is too long)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = chirp_create_schema.load(payload)

    chirp = Chirp(body=clean_body(data["body"]), user_id=str(g.current_user_id))
    storage.new(chirp)
    storage.save()

    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps, optionally by author
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
    responses:
      200:
        description: OK
      400:
        description: Invalid author id
    """
    session = storage.get_session()
    query = session.query(Chirp)

    author_id = request.args.get("author_id")
    if author_id:
        query = query.filter(Chirp.user_id == parse_uuid(author_id, "author id"))

    rows = query.order_by(parse_sort()).all()
    return jsonify(chirps_out_schema.dump(rows)), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    """
    Fetch one chirp
    ---
    tags:
      - Chirps
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200:
        description: OK
      400:
        description: Malformed id
      404:
        description: Not found
    """
    return jsonify(chirp_out_schema.dump(get_chirp_or_404(chirp_id))), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete one of the current user's chirps
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204:
        description: Deleted
      400:
        description: Malformed id
      401:
        description: Unauthorized
      403:
        description: Not the author
      404:
        description: Not found
    """
    chirp = get_chirp_or_404(chirp_id)
    if chirp.user_id != str(g.current_user_id):
        raise AuthorizationError()

    chirp.delete()
    storage.save()
    return ("", 204)
