from __future__ import annotations

import logging
import threading

from flask import Blueprint, current_app, jsonify

from api.errors import AuthorizationError
from models import storage

bp = Blueprint("admin", __name__)

METRICS_PAGE = (
    "<html><body><h1>Welcome, Chirpy Admin</h1>"
    "<p>Chirpy has been visited {hits} times!</p></body></html>"
)


class HitCounter:
    """Request counter shared by every worker thread of one app."""

    def __init__(self):
        self._lock = threading.Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def hit_counter() -> HitCounter:
    return current_app.extensions["fileserver_hits"]


@bp.get("/metrics")
def metrics():
    """
    File server hit count
    ---
    tags:
      - Admin
    produces:
      - text/html
    responses:
      200:
        description: HTML page with the hit count
    """
    body = METRICS_PAGE.format(hits=hit_counter().value)
    return body, 200, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/reset")
def reset():
    """
    Delete all users, chirps and refresh tokens and zero the hit counter (dev only)
    ---
    tags:
      - Admin
    responses:
      200:
        description: OK
      403:
        description: Not running on the dev platform
    """
    if current_app.config.get("PLATFORM") != "dev":
        raise AuthorizationError()

    storage.reset()
    hit_counter().reset()
    logging.warning("Database reset via /admin/reset")
    return jsonify({"status": "ok"}), 200
