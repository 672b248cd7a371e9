import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, tmp_path) -> TestClient:
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))

    from carereport.core.settings import get_settings

    get_settings.cache_clear()

    from carereport.main import app

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()
