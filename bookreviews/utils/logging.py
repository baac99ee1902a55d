"""Package logging helpers.

All loggers live under the ``bookreviews`` namespace. The handler and level
are configured once on that package logger; module loggers only propagate
to it.
"""
from __future__ import annotations

import logging
import threading

from bookreviews import config as app_config

ROOT_NAME = "bookreviews"
_LOCK = threading.Lock()
_CONFIGURED = False


def _configure_root() -> logging.Logger:
    global _CONFIGURED
    root = logging.getLogger(ROOT_NAME)
    if _CONFIGURED:
        return root
    with _LOCK:
        if _CONFIGURED:
            return root
        level = getattr(logging, app_config.log_level_name(), logging.INFO)
        root.setLevel(level)
        if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[bookreviews] %(asctime)s %(levelname)s %(name)s %(message)s"))
            root.addHandler(handler)
        root.propagate = False
        _CONFIGURED = True
    return root


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    """Return ``bookreviews.<name>`` (or the package logger itself)."""
    root = _configure_root()
    if name == ROOT_NAME:
        return root
    if not name.startswith(ROOT_NAME + "."):
        name = f"{ROOT_NAME}.{name}"
    return logging.getLogger(name)


__all__ = ["ROOT_NAME", "get_logger"]
