"""Application factory and app-wide configuration."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from vcoin.app.api.routes import api_bp
from vcoin.config import Settings, get_settings
from vcoin.core.clock import Clock, SystemClock
from vcoin.core.storage import InMemoryStorage, Storage, sample_storage, select_data_source

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    clock: Optional[Clock] = None,
) -> Flask:
    """Build the Flask app instance."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    fallback = sample_storage(settings.default_timezone) if settings.use_sample_data else InMemoryStorage()
    if storage is None:
        chosen, source = fallback, "sample" if settings.use_sample_data else "memory"
    else:
        chosen, source = select_data_source(storage, fallback)
    logger.info("serving accrual data from %s storage", source)

    app.config["VCOIN_SETTINGS"] = settings
    app.config["VCOIN_STORAGE"] = chosen
    app.config["VCOIN_DATA_SOURCE"] = source
    app.config["VCOIN_CLOCK"] = clock or SystemClock()

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
