from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import get_config, validate_config
from .errors import register_error_handlers
from models.db_storage import DBStorage
from services.auth import AuthService
from utils.password_hasher import CredentialHasher
from utils.security import TokenCodec

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Catalog API",
        "version": "1.0.0",
        "description": "Catalog backend: registration, login and token lifecycle.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
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

LOG_FORMAT = "%(levelname)s - %(asctime)s - %(name)s - %(message)s"


def configure_logging(level_name: str) -> None:
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    logging.getLogger().setLevel(level)


def build_auth_service(config) -> AuthService:
    """Wire storage, token codec and hasher from a Flask config mapping."""
    storage = DBStorage(
        config["DATABASE_URL"],
        isolation_level=config.get("DB_ISOLATION_LEVEL"),
        echo=config.get("DB_ECHO", False),
    )
    storage.reload()
    codec = TokenCodec(
        config["JWT_SECRET"],
        issuer=config["JWT_ISSUER"],
        access_ttl=config["ACCESS_TOKEN_EXPIRES"],
        refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
    )
    hasher = CredentialHasher(
        time_cost=config["ARGON2_TIME_COST"],
        memory_cost=config["ARGON2_MEMORY_COST"],
        parallelism=config["ARGON2_PARALLELISM"],
    )
    return AuthService(store=storage, codec=codec, hasher=hasher)


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class (tests use it
    to point at a different database or shorten token lifetimes).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    config_class = get_config(config_name)
    validate_config(config_class)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    auth_service = build_auth_service(app.config)
    app.extensions["auth_service"] = auth_service
    app.extensions["storage"] = auth_service.store

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1")
    app.register_blueprint(users_bp, url_prefix="/api/v1")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Catalog API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
