from __future__ import annotations

import asyncio
import logging

from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class HandlerTimeoutMiddleware:
    """
    Caps total handler execution time, with optional per-path budgets.

    ``path_timeouts`` maps a path prefix to its budget in seconds; the longest
    matching prefix wins. If the budget is exceeded before the response has
    started, a 504 JSON error is returned.
    """

    def __init__(
        self,
        app: ASGIApp,
        timeout_seconds: float | None = None,
        path_timeouts: dict[str, float] | None = None,
    ) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds or DEFAULT_TIMEOUT_SECONDS
        self.path_timeouts = dict(path_timeouts or {})

    def budget_for(self, path: str) -> float:
        matches = [prefix for prefix in self.path_timeouts if path.startswith(prefix)]
        if not matches:
            return self.timeout_seconds
        return self.path_timeouts[max(matches, key=len)]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        budget = self.budget_for(scope.get("path", ""))
        try:
            await asyncio.wait_for(self.app(scope, receive, _send), timeout=budget)
        except asyncio.TimeoutError:
            if response_started:
                raise
            logger.error("Handler for %s exceeded %ss", scope.get("path"), budget)
            resp = JSONResponse(
                status_code=504,
                content={
                    "error": "Gateway Timeout",
                    "details": "The request took too long to complete.",
                },
            )
            await resp(scope, receive, send)
