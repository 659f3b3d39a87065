from __future__ import annotations
from functools import wraps
from flask import request, g
from api.errors import AuthenticationError
from utils.sessions import authenticate, verify_server_callback


def jwt_required():
    """Require a valid access token; exposes the caller id as g.current_user_id."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user_id = authenticate(request.headers.get("Authorization"))
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def api_key_required():
    """
    Allow only the trusted webhook caller ('Authorization: ApiKey <key>').
    Anything else is a 401.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not verify_server_callback(request.headers.get("Authorization")):
                raise AuthenticationError()
            return fn(*args, **kwargs)

        return wrapper

    return decorator
