import asyncio

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pinstore.api.middleware.timeout import HandlerTimeoutMiddleware


def _app(**kwargs) -> FastAPI:
    app = FastAPI()
    app.add_middleware(HandlerTimeoutMiddleware, **kwargs)

    @app.get("/api/slow")
    async def _slow():
        await asyncio.sleep(0.2)
        return {"ok": True}

    @app.get("/api/proxy-upload")
    async def _proxy():
        await asyncio.sleep(0.2)
        return {"ok": True}

    return app


@pytest.mark.asyncio
async def test_handler_timeout_returns_504_json():
    app = _app(timeout_seconds=0.01)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        r = await client.get("/api/slow")
    assert r.status_code == 504
    assert r.json()["error"] == "Gateway Timeout"


@pytest.mark.asyncio
async def test_path_budget_overrides_default():
    app = _app(timeout_seconds=0.01, path_timeouts={"/api/proxy-upload": 5})
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        slow = await client.get("/api/slow")
        proxied = await client.get("/api/proxy-upload")
    assert slow.status_code == 504
    assert proxied.status_code == 200
    assert proxied.json() == {"ok": True}


def test_longest_prefix_wins():
    mw = HandlerTimeoutMiddleware(FastAPI(), timeout_seconds=10, path_timeouts={"/api": 20, "/api/proxy-upload": 60})
    assert mw.budget_for("/api/proxy-upload") == 60
    assert mw.budget_for("/api/upload") == 20
    assert mw.budget_for("/ping") == 10
