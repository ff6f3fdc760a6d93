"""Shared test fixtures for weak-cache."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from weak_cache.cache import WeakCache
from weak_cache.config import get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from WEAK_CACHE_* variables and the settings cache."""
    for key in list(os.environ.keys()):
        if key.startswith("WEAK_CACHE_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cache() -> Iterator[WeakCache]:
    """Cache without a sweeper; reclamation is only observed via get/cleanup."""
    c = WeakCache(cleanup_interval=None)
    yield c
    c.release()


@pytest.fixture
def sweeping_cache() -> Iterator[WeakCache]:
    """Cache with a fast sweeper."""
    c = WeakCache(cleanup_interval=0.05)
    yield c
    c.release()
