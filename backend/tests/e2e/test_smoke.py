import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_endpoint(client: AsyncClient):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_advisor_routes_registered(client: AsyncClient):
    routes = (await client.get("/__routes")).json()
    for path in ("/advisor/chat", "/advisor/plan", "/advisor/plan/generate", "/advisor/review", "/dashboard"):
        assert any(r.startswith(f"{path}  ") for r in routes), path
