"""HTTP route registration."""
from __future__ import annotations

from typing import Any

from .catalog_api import register_catalog_api
from .health import register_health


def register_all(app: Any) -> None:
    register_health(app)
    register_catalog_api(app)


__all__ = ["register_all", "register_catalog_api", "register_health"]
