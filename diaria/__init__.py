"""La Diaria results ingestion and analysis.

The batch pipeline lives in :mod:`diaria.cli`; this module exposes the
read-only HTTP API factory.
"""

from __future__ import annotations

from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(overrides: dict[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config keys applied on top of the environment config.

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from diaria.config import get_config
    from diaria.db import init_db
    from diaria.error_handlers import register_error_handlers
    from diaria.logging_config import configure_logging
    from diaria.routes.health import health_bp
    from diaria.routes.lottery import lottery_bp

    app = Flask(__name__)
    app.config.from_object(get_config()())
    if overrides:
        app.config.update(overrides)

    configure_logging(str(app.config.get("LOG_LEVEL", "INFO")))
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(lottery_bp, url_prefix="/api/lottery")

    return app
