import httpx
import pytest

from pinstore.http import new_async_httpx_client


@pytest.mark.asyncio
async def test_async_client_applies_timeout_to_every_phase():
    async with new_async_httpx_client(timeout_seconds=0.321) as client:
        assert isinstance(client.timeout, httpx.Timeout)
        assert client.timeout.connect == pytest.approx(0.321)
        assert client.timeout.read == pytest.approx(0.321)
        assert client.timeout.write == pytest.approx(0.321)
        assert client.timeout.pool == pytest.approx(0.321)


@pytest.mark.asyncio
async def test_extra_client_options_pass_through():
    async with new_async_httpx_client(timeout_seconds=50, follow_redirects=True) as client:
        assert client.timeout.read == pytest.approx(50)
        assert client.follow_redirects is True
