# tests/services/conftest.py
from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from mediatags.services.api.app import create_app
from mediatags.services.api.deps import get_tag_service


@pytest.fixture()
def api_client(service):
    """
    A TestClient whose `get_tag_service` dependency is overridden to return
    one in-memory TagService for the whole test, so POST -> GET works and
    nothing touches the configured database.
    """
    app = create_app()
    app.dependency_overrides[get_tag_service] = lambda: service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
