"""
FastAPI application serving the cache-control demo endpoints.

Every strategy in the catalog gets its own GET route. The handlers only
translate between HTTP and `respond`; all header and validator decisions
live in the strategy module.
"""

import logging
from typing import Any, Callable, Coroutine, Dict, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from cachedemo._exceptions import SimulatedServerError
from cachedemo._pages import render_index
from cachedemo._state import ServerState
from cachedemo._strategies import STRATEGIES, Strategy, respond
from cachedemo._utils import isoformat_millis, utcnow
from cachedemo._validation import RequestValidators
from cachedemo.asgi import RequestLoggingMiddleware
from cachedemo.models import StrategyResponse

logger = logging.getLogger(__name__)

SIMULATED_ERROR_MESSAGE = "Simulated server error for stale-if-error testing"

_Endpoint = Callable[..., Coroutine[Any, Any, Response]]


def get_state(request: Request) -> ServerState:
    """Dependency returning the state owned by the application."""
    return request.app.state.server_state


def to_http_response(result: StrategyResponse) -> Response:
    headers = dict(result.headers)
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)


def _strategy_endpoint(strategy: Strategy) -> _Endpoint:
    async def endpoint(request: Request, state: ServerState = Depends(get_state)) -> Response:
        validators = RequestValidators.from_headers(request.headers)
        result = respond(strategy, state.snapshot(), validators, utcnow())
        return to_http_response(result)

    endpoint.__name__ = strategy.name.replace("-", "_")
    endpoint.__doc__ = strategy.description
    return endpoint


async def index() -> HTMLResponse:
    return HTMLResponse(render_index())


async def update_data(state: ServerState = Depends(get_state)) -> Dict[str, Any]:
    """Increment counter and version so validators stop matching."""
    data = state.update()
    logger.info("Data updated: counter=%d version=%d", data.counter, data.version)
    return {
        "message": "Data updated successfully",
        "newCounter": data.counter,
        "newVersion": data.version,
        "updatedAt": isoformat_millis(data.last_updated),
    }


async def force_error() -> Response:
    """Always fails, so clients can fall back to stale-if-error copies."""
    raise SimulatedServerError(SIMULATED_ERROR_MESSAGE)


async def api_status(state: ServerState = Depends(get_state)) -> Dict[str, Any]:
    return {
        "serverTime": isoformat_millis(utcnow()),
        "dataStore": state.snapshot().to_json(),
        "uptime": state.uptime(),
    }


async def simulated_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Simulated server error: path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": str(exc), "timestamp": isoformat_millis(utcnow())},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error: path=%s error=%s",
        request.url.path,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "timestamp": isoformat_millis(utcnow())},
    )


def create_app(state: Optional[ServerState] = None) -> FastAPI:
    """
    Build the demo application.

    Args:
        state: Server state to serve. A fresh one is created when omitted,
            so every application starts with counter 0 and version 1.
    """
    app = FastAPI(title="Cache Control Demo")
    app.state.server_state = state if state is not None else ServerState()

    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(SimulatedServerError, simulated_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_api_route("/", index, methods=["GET"], response_class=HTMLResponse, include_in_schema=False)
    for strategy in STRATEGIES:
        app.add_api_route(strategy.path, _strategy_endpoint(strategy), methods=["GET"], name=strategy.name)
    app.add_api_route("/update-data", update_data, methods=["GET"])
    app.add_api_route("/force-error", force_error, methods=["GET"])
    app.add_api_route("/api/status", api_status, methods=["GET"])

    logger.debug("Registered routes: strategies=%d", len(STRATEGIES))
    return app
