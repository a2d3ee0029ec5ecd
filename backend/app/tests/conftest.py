# tests/conftest.py
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings, get_settings
from app.main import app
from app.services.allow_list import AllowList
from app.services.auth import AuthService
from app.tests.fakes import ITEM_ROWS, FakeConnection, FakePool

TEST_SECRET = "test-secret-value-0123456789abcdef"


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="postgresql://test/test", JWT_SECRET=TEST_SECRET)


@pytest.fixture
def allow_list(settings) -> AllowList:
    return AllowList.from_config(settings.SEARCH_ALLOW_LIST)


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection(rows=ITEM_ROWS)


@pytest.fixture
def fake_pool(fake_conn) -> FakePool:
    return FakePool(fake_conn)


@pytest.fixture
def client(settings, allow_list, fake_pool):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[deps.get_allow_list] = lambda: allow_list
    app.dependency_overrides[deps.get_pool] = lambda: fake_pool
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


@pytest.fixture
def admin_headers(settings) -> Dict[str, str]:
    token = AuthService(settings).create_jwt("admin")
    return {"Authorization": f"Bearer {token}"}
