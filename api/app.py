"""Flask application factory."""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from api.debug_routes import debug_bp
from api.routes import api_bp
from config import configure_logging, settings
from services.customer_directory import CustomerDirectory

logger = logging.getLogger(__name__)


def create_app(directory: CustomerDirectory | None = None) -> Flask:
    """Create and configure the Flask application.

    Fails fast with ``ConfigError`` when the shop domain or token is unset.
    """
    configure_logging(settings.log_level)
    settings.require_shopify()

    logger.info(
        "Server starting: shop=%s api_version=%s port=%s token=%s",
        settings.shop_domain,
        settings.shopify_api_version,
        settings.server_port,
        settings.masked_token(),
    )

    app = Flask(__name__)
    CORS(app, origins=settings.cors_origins)

    if directory is None:
        directory = CustomerDirectory.load(settings.customer_directory_path)
    app.extensions["customer_directory"] = directory

    app.register_blueprint(api_bp)
    app.register_blueprint(debug_bp)

    @app.route("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    # --- Error handlers ---

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return jsonify({"error": "Not found"}), 404
        return jsonify({"error": "Not found", "path": request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    return app
