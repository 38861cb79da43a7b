import httpx
import pytest

from services.api.app import app
from services.api.config import get_settings


@pytest.fixture(autouse=True)
def _settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_healthz_and_readyz_and_metrics() -> None:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json().get("status") == "ok"

        # Readiness should succeed by default (no strict checks configured)
        r2 = await client.get("/readyz")
        assert r2.status_code == 200
        assert r2.json().get("status") == "ready"

        r3 = await client.get("/metrics")
        assert r3.status_code == 200
        assert "ig_api_healthz_hits" in r3.text

        r4 = await client.get("/v1/")
        assert r4.json()["service"] == "image-generation-server"


@pytest.mark.asyncio
async def test_readyz_reports_missing_credentials(monkeypatch, tmp_path) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("IG_READY_CHECKS", "credentials,storage")
    monkeypatch.setenv("IG_OUTPUT_DIR", str(tmp_path / "images"))
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        r = await client.get("/readyz")
        assert r.status_code == 503
        assert "OPENAI_API_KEY" in r.text

        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        get_settings.cache_clear()
        r2 = await client.get("/readyz")
        assert r2.status_code == 200
        assert (tmp_path / "images").is_dir()
