"""Shared fixtures: a fresh in-memory SQLite database per test."""
from __future__ import annotations

import pytest

from bookreviews.db.engine import init_engine_once, reset_for_tests
from bookreviews.factories import reset_factories


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("BOOKREVIEWS_DB_PATH", ":memory:")
    init_engine_once()
    reset_factories()
    yield
    reset_for_tests(drop=True)
