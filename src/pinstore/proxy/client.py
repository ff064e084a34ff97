from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from pinstore.exceptions import ConfigurationError, SerializationError, UpstreamError
from pinstore.http import new_async_httpx_client

logger = logging.getLogger(__name__)


class UploadProxy:
    """
    Forwards multipart uploads to the WebHash ``/upload`` endpoint.

    The body is sent byte-for-byte with its original ``Content-Type`` (and so
    its multipart boundary). A single attempt is made; there are no retries.
    ``timeout_seconds`` caps the whole exchange, redirects included, not just
    each connect or read phase.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        *,
        timeout_seconds: float = 50.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return f"{self.api_url}/upload"

    def require_api_key(self) -> str:
        if not self.api_key:
            logger.error("WebHash API key is not configured")
            raise ConfigurationError("WebHash API key is not configured")
        return self.api_key

    async def forward(self, body: bytes, content_type: str) -> Any:
        api_key = self.require_api_key()
        logger.info("Proxying request to WebHash API: %s", self.api_url)

        headers = {"Authorization": f"Bearer {api_key}"}
        if content_type:
            headers["Content-Type"] = content_type

        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with new_async_httpx_client(
                    timeout_seconds=self.timeout_seconds,
                    transport=self._transport,
                    follow_redirects=True,
                ) as client:
                    response = await client.post(self.upload_url, content=body, headers=headers)
        except TimeoutError as exc:
            logger.error("WebHash API did not answer within %ss", self.timeout_seconds)
            raise UpstreamError(
                f"WebHash API fetch error: timed out after {self.timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            reason = str(exc) or type(exc).__name__
            logger.error("Error fetching from WebHash API: %s", reason)
            raise UpstreamError(f"WebHash API fetch error: {reason}") from exc

        if not response.is_success:
            logger.error(
                "WebHash API error: status=%s reason=%s body=%s",
                response.status_code, response.reason_phrase, response.text,
            )
            raise UpstreamError(
                f"WebHash API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Error parsing WebHash API response: %s", exc)
            raise SerializationError("Failed to parse WebHash API response") from exc
        logger.debug("WebHash API response: %s", data)
        return data
