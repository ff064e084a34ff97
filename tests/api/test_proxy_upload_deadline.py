"""
The upstream wait is bounded end to end, even when WebHash keeps the socket
busy by trickling a response slower than any single read timeout.
"""

from __future__ import annotations

import asyncio
import time

import pytest

from pinstore.exceptions import UpstreamError
from pinstore.proxy.client import UploadProxy

BODY = b'{"cid": "QmSlowButSteady"}'


async def _start_trickling_upstream(stop: asyncio.Event, delay: float):
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/json\r\n"
                b"Content-Length: " + str(len(BODY)).encode() + b"\r\n\r\n"
            )
            await writer.drain()
            for i in range(len(BODY)):
                if stop.is_set():
                    break
                writer.write(BODY[i : i + 1])
                await writer.drain()
                await asyncio.sleep(delay)
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    return await asyncio.start_server(handle, "127.0.0.1", 0)


@pytest.mark.asyncio
async def test_trickling_upstream_is_cut_off_at_the_total_budget():
    stop = asyncio.Event()
    server = await _start_trickling_upstream(stop, delay=0.2)
    port = server.sockets[0].getsockname()[1]
    proxy = UploadProxy(f"http://127.0.0.1:{port}", "k", timeout_seconds=0.5)

    started = time.monotonic()
    try:
        with pytest.raises(UpstreamError) as excinfo:
            await proxy.forward(b"x", "text/plain")
    finally:
        stop.set()
        server.close()
        await server.wait_closed()
    elapsed = time.monotonic() - started

    # each byte arrives well inside the per-read timeout, the whole body would take ~5s
    assert elapsed < 2.0
    assert excinfo.value.message.startswith("WebHash API fetch error")
    assert excinfo.value.status_code == 500
