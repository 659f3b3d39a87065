from flask import Blueprint, current_app, send_from_directory

from api.admin import hit_counter

bp = Blueprint("fileserver", __name__)

INDEX_FILE = "index.html"


@bp.before_request
def count_hit():
    hit_counter().increment()


@bp.get("/")
def index():
    """
    Front-end landing page
    ---
    tags:
      - App
    responses:
      200:
        description: index.html
    """
    return send_from_directory(current_app.config["FILESERVER_ROOT"], INDEX_FILE)


@bp.get("/<path:path>")
def serve(path: str):
    """
    Static front-end files
    ---
    tags:
      - App
    parameters:
      - in: path
        name: path
        type: string
        required: true
    responses:
      200:
        description: File contents
      404:
        description: No such file
    """
    return send_from_directory(current_app.config["FILESERVER_ROOT"], path)
