from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from utils.security import configure_password_hasher

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Chirpy API",
        "version": "1.0.0",
        "description": "REST API for users posting short chirps.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        },
        "ApiKey": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Webhook key with the `ApiKey ` prefix, e.g. \"ApiKey f271c81f...\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    overrides is applied on top of the selected config class (handy in tests).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))
    configure_password_hasher(app.config)

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Uniform error envelope
    register_error_handlers(app)

    from .admin import HitCounter
    app.extensions["fileserver_hits"] = HitCounter()

    from .health import bp as health_bp
    from .admin import bp as admin_bp
    from .fileserver import bp as fileserver_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .chirps import bp as chirps_bp
    from .webhooks import bp as webhooks_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(fileserver_bp, url_prefix="/app")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(chirps_bp, url_prefix="/api")
    app.register_blueprint(webhooks_bp, url_prefix="/api")

    # Ensure the DB session is removed at the end of each request/app context
    # (scoped_session.remove(), preventing connection leaks)
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    return app
