from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt, cache
from .api.v1 import v1_bp
from .errors import register_error_handlers
from flask_swagger_ui import get_swaggerui_blueprint
import os

SWAGGER_URL = "/swagger"
OPENAPI_URL = "/openapi/cms.yaml"


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cache.init_app(app)

    # Tables must be registered on the metadata before create_all / migrate
    from . import models  # noqa: F401

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_api_docs(app)

    app.logger.debug("App created with '%s' config", config_name)
    return app


def register_api_docs(app: Flask) -> None:
    """OpenAPI document plus a Swagger UI pointing at it."""

    @app.route(OPENAPI_URL, methods=["GET"], endpoint="openapi_cms")
    def serve_openapi():
        spec_path = os.path.join(current_app.root_path, "api", "v1", "cms_openapi.yaml")

        if not os.path.exists(spec_path):
            raise FileNotFoundError("cms_openapi.yaml not found")

        return send_file(spec_path, mimetype="application/yaml")

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        OPENAPI_URL,
        config={
            "app_name": "Page Composition CMS",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )
    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)
