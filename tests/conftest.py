from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chatbot_backend.api.app import create_app
from chatbot_backend.config.settings import get_settings

ADMIN_KEY = "test-admin-key"


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("ADMIN_API_KEY", ADMIN_KEY)
    monkeypatch.setenv("REPORTS_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("RESPONDER_ENABLED", "false")
    get_settings.cache_clear()
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    return {"x-admin-key": ADMIN_KEY}
