from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import Headers, MutableHeaders

from app.observability.spans import span


class RequestContextMiddleware:
    """Runs each HTTP request inside an ``http_request`` span bound to a request ID.

    An incoming ``X-Request-ID`` is reused, otherwise one is generated; either
    way it is echoed on the response and attached to every event logged while
    the request is handled. One ``http_request`` access event is emitted after
    the span closes.
    """

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get("x-request-id") or str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")

        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id

            await send(message)

        try:
            with span("http_request", method=method, path=path):
                await self.app(scope, receive, send_wrapper)
        finally:
            structlog.get_logger("access").info(
                "http_request",
                method=method,
                path=path,
                status_code=status_code,
                elapsed_ms=round((perf_counter() - start) * 1000.0, 2),
            )

            structlog.contextvars.clear_contextvars()
