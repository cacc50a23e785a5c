"""Fixtures for API tests: an app wired to a throwaway database."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from estatesearch.api.app import create_app
from estatesearch.config.settings import SearchSettings, Settings
from estatesearch.storage.connection import close_connection


def _make_client(settings: Settings):
    settings.ensure_dirs()
    app = create_app(settings)
    return app, TestClient(app)


@pytest.fixture
def api_settings(tmp_path) -> Settings:
    return Settings(project_root=tmp_path)


@pytest.fixture
def client(api_settings):
    """TestClient plus the app's listing store, for seeding."""
    app, test_client = _make_client(api_settings)
    yield test_client, app.state.listing_store
    close_connection(api_settings.db_path)


@pytest.fixture
def small_page_client(tmp_path):
    """Same as client, but the API caps pages at five records."""
    settings = Settings(project_root=tmp_path, search=SearchSettings(max_page_size=5))
    app, test_client = _make_client(settings)
    yield test_client, app.state.listing_store
    close_connection(settings.db_path)
