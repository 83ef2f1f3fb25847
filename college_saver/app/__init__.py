"""Application factory and app-wide configuration."""

from __future__ import annotations

import uuid
from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from college_saver.app.api.routes import api_bp
from college_saver.config import Settings, load_settings
from college_saver.domain.pricing import QuoteSource
from college_saver.utils.logging import set_request_id


def create_app(settings: Optional[Settings] = None, quote_source: Optional[QuoteSource] = None) -> Flask:
    """Build the Flask app instance.

    `quote_source` is the live price lookup; without one, share prices come from the
    configured fallback table.
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["QUOTE_SOURCE"] = quote_source

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    @app.before_request
    def _tag_request() -> None:
        set_request_id(request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12])

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
