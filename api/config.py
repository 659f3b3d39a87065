"""
Environment-aware configuration.
Values are read once at startup; the database URL is handled by DBStorage.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # "dev" unlocks POST /admin/reset; anything else is treated as production
    PLATFORM = os.getenv("PLATFORM", "prod")
    # Access tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "chirpy")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "3600")))
    # Refresh tokens (60 days)
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", str(60 * 24 * 3600))))
    # Shared secret for the payment provider webhook
    POLKA_KEY = os.getenv("POLKA_KEY", "")
    # Argon2id cost parameters (argon2-cffi defaults)
    ARGON2_TIME_COST = int(os.getenv("ARGON2_TIME_COST", "3"))
    ARGON2_MEMORY_COST = int(os.getenv("ARGON2_MEMORY_COST", "65536"))
    ARGON2_PARALLELISM = int(os.getenv("ARGON2_PARALLELISM", "4"))
    # Directory served under /app
    FILESERVER_ROOT = os.getenv(
        "FILESERVER_ROOT", os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "static")
    )


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    PLATFORM = "dev"
    JWT_SECRET = "test-secret-key-for-testing-only-do-not-use"
    POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"
    # Cheap hashes keep the suite fast
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 8
    ARGON2_PARALLELISM = 1


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod).
    """
    if name:
        name = name.lower()
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
