"""Application initialization / wiring.

Orchestrates: DB init and route registration.
"""
from __future__ import annotations

from flask import Flask

from bookreviews import config as app_config
from bookreviews.db import init_engine_once
from bookreviews.routes import register_all as register_routes
from bookreviews.utils.logging import get_logger

LOG = get_logger("bookreviews.startup")


def init_app(app: Flask) -> Flask:
    init_engine_once()
    register_routes(app)
    LOG.info("bookreviews initialized: %s", app_config.summarize_runtime_config())
    return app


def create_app() -> Flask:
    app = Flask(app_config.APP_NAME)
    return init_app(app)


__all__ = ["create_app", "init_app"]
