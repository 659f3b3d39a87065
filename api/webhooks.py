from __future__ import annotations

import logging

from flask import Blueprint, request

from api.errors import NotFoundError
from api.chirps import parse_uuid
from models import storage
from models.user import User
from models.schemas.webhook import USER_UPGRADED, WebhookSchema
from utils.decorators import api_key_required

bp = Blueprint("webhooks", __name__)

webhook_schema = WebhookSchema()


@bp.post("/polka/webhooks")
@api_key_required()
def polka_webhook():
    """
    Payment provider callback: upgrade a user to Chirpy Red
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204:
        description: Processed (or ignored event)
      400:
        description: Malformed payload
      401:
        description: Missing or wrong API key
      404:
        description: Unknown user
    """
    payload = request.get_json(silent=True) or {}
    data = webhook_schema.load(payload)

    if data["event"] != USER_UPGRADED:
        return ("", 204)

    user_id = parse_uuid(data["data"].get("user_id"), "user id")
    session = storage.get_session()
    rows = session.query(User).filter(User.id == user_id).update(
        {User.is_chirpy_red: True}, synchronize_session="fetch"
    )
    storage.save()
    if rows == 0:
        raise NotFoundError("User not found")

    logging.info("User %s upgraded to Chirpy Red", user_id)
    return ("", 204)
