"""Shared fixtures for integration tests.

These tests use real infrastructure components (load_config, the FastAPI
lifespan, MemoryCacheAdapter, HttpxTmdbClient) with mocked HTTP via respx.
"""

from __future__ import annotations

import os

import pytest
import respx


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide MANIFESTARR_* variables of the developer shell."""
    for name in list(os.environ):
        if name.startswith("MANIFESTARR_"):
            monkeypatch.delenv(name)


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router
