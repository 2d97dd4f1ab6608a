from __future__ import annotations

import logging
import typing as t

from cachedemo._utils import isoformat_millis, utcnow

logger = logging.getLogger(__name__)


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    asgi: dict[str, str]
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None
    state: dict[str, t.Any]
    extensions: dict[str, t.Any]


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


class RequestLoggingMiddleware:
    """
    ASGI middleware that logs one line per HTTP request.

    The line carries the time the request arrived, the method, the path with
    its query string and the status the application answered with. Requests
    that fail before a response starts are logged as errors and re-raised.

    Args:
        app: The ASGI application to wrap.

    Example:
        ```python
        from fastapi import FastAPI
        from cachedemo.asgi import RequestLoggingMiddleware

        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)
        ```
    """

    def __init__(self, app: _ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        """
        Handle an ASGI request.

        Args:
            scope: The ASGI scope dictionary.
            receive: The ASGI receive callable.
            send: The ASGI send callable.
        """
        # Only handle HTTP requests
        if scope["type"] != "http":
            logger.debug("Skipping non-HTTP request: type=%s", scope["type"])
            await self.app(scope, receive, send)
            return

        received_at = isoformat_millis(utcnow())
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"").decode("latin1")
        full_path = f"{path}?{query_string}" if query_string else path

        status_code: int | None = None

        async def inner_send(message: dict[str, t.Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, inner_send)
        except Exception as e:
            logger.error(
                "%s - %s %s failed: error=%s",
                received_at,
                method,
                full_path,
                str(e),
                exc_info=True,
            )
            raise

        logger.info("%s - %s %s status=%s", received_at, method, full_path, status_code)
