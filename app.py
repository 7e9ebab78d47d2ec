"""Main application module for NewsDigest."""
from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from api_routes import register_routes
from app_utils import configure_logging
from news import NewsServices, build_services

logger = logging.getLogger("newsdigest")


def create_app(services: Optional[NewsServices] = None) -> Flask:
    """Build the Flask app around one set of news services.

    Args:
        services: Pre-wired services (tests inject stub provider/engine); built from
            settings when omitted.

    Returns:
        Configured Flask app.
    """
    services = services or build_services()
    app = Flask(__name__)
    app.json.sort_keys = False
    CORS(app)
    app.extensions["news_services"] = services
    register_routes(app, services)
    logger.info(
        "NewsDigest ready (provider=%s, engine=%s)",
        getattr(services.pipeline.provider, "name", "provider"),
        getattr(services.summarizer.engine, "name", "engine"),
    )
    return app


load_dotenv(os.getenv("NEWSDIGEST_DOTENV", ".env"))
configure_logging()

app = create_app()

__all__ = ["app", "create_app"]
