"""
Shared fixtures: settings, an in-memory Mongo, a recorded WebHash upstream,
a controllable clock and an ASGI client for the app.
"""

from __future__ import annotations

from typing import Callable, List

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pinstore.app.settings import Settings
from pinstore.cache import ListCache
from pinstore.main import create_app
from tests.fakes import ClientFactory


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamRecorder:
    """``httpx.MockTransport`` handler that records every request it receives."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"cid": "QmTestCid", "size": len(request.content)}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        mongodb_uri="mongodb://fake:27017",
        mongodb_db="pinstore_test",
        webhash_api_url="http://webhash.test",
        webhash_api_key="test-key",
    )


@pytest.fixture
def mongo_factory() -> ClientFactory:
    return ClientFactory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def list_cache(clock) -> ListCache:
    return ListCache(ttl_seconds=30, clock=clock)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder()


@pytest.fixture
def app(settings, mongo_factory, upstream, list_cache):
    return create_app(
        settings,
        mongo_client_factory=mongo_factory,
        upstream_transport=upstream.transport,
        list_cache=list_cache,
        configure_logging=False,
    )


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def files_collection(mongo_factory):
    return mongo_factory.database["files"]


@pytest.fixture
def users_collection(mongo_factory):
    return mongo_factory.database["users"]


def file_payload(**overrides) -> dict:
    payload = {
        "fileName": "report.pdf",
        "cid": "QmReport",
        "size": "2048",
        "mimeType": "application/pdf",
        "walletAddress": "0xabc",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return file_payload
