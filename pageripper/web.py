# File: pageripper/web.py
"""pageripper.web: HTTP front-end (aiohttp) exposing rips and the usage counter as JSON."""

from __future__ import annotations

from typing import Any, Dict, Optional

from aiohttp import web

from pageripper.config import RipperConfig
from pageripper.counter.store import CounterStore, open_counter_store
from pageripper.engine import Engine
from pageripper.errors import GENERIC_TARGET_MESSAGE, RipperError
from pageripper.logger import logger

__all__ = ["create_app", "run_server", "CORS_HEADERS", "ENGINE_KEY"]

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "DELETE,GET,HEAD,OPTIONS,PATCH,POST,PUT",
    "Access-Control-Allow-Headers": "*",
}

ENGINE_KEY = web.AppKey("engine", Engine)
STORE_KEY = web.AppKey("store", CounterStore)


def _error(message: str = GENERIC_TARGET_MESSAGE) -> web.Response:
    return web.json_response({"message": message}, status=422)


@web.middleware
async def cors_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        # router errors (404, 405) and explicit HTTP errors are raised, not returned
        exc.headers.update(CORS_HEADERS)
        raise
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response(
            {"message": "Internal server error"}, status=500, headers=CORS_HEADERS
        )
    response.headers.update(CORS_HEADERS)
    return response


async def handle_options(request: web.Request) -> web.Response:
    return web.Response(text="Responded to OPTIONS")


async def handle_rip(request: web.Request) -> web.Response:
    """POST {"target": "<url>"} → {"links": [...], "hostnames": {...}, "ripcount": n}."""
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.debug(
            "Invalid request - must be JSON with field named target containing a valid URL: %s", exc
        )
        payload = None
    target = payload.get("target") if isinstance(payload, dict) else None
    if not isinstance(target, str):
        return _error()

    try:
        report = await request.app[ENGINE_KEY].rip(target)
    except RipperError as exc:
        return _error(exc.message)
    return web.json_response(report.to_dict())


async def handle_count(request: web.Request) -> web.Response:
    return web.json_response({"count": await request.app[ENGINE_KEY].count()})


def create_app(config: RipperConfig, store: Optional[CounterStore] = None) -> web.Application:
    """Build the application; without *store* the configured one is opened on startup."""
    app = web.Application(middlewares=[cors_middleware])

    async def _startup(app: web.Application) -> None:
        app[STORE_KEY] = store if store is not None else await open_counter_store(config.counter)
        app[ENGINE_KEY] = Engine(config, app[STORE_KEY])

    async def _cleanup(app: web.Application) -> None:
        await app[ENGINE_KEY].drain()
        if store is None:
            await app[STORE_KEY].close()

    app.on_startup.append(_startup)
    app.on_cleanup.append(_cleanup)

    app.router.add_post("/", handle_rip)
    app.router.add_post("/rip", handle_rip)
    app.router.add_get("/count", handle_count)
    app.router.add_route("OPTIONS", "/{tail:.*}", handle_options)
    return app


def run_server(config: RipperConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve until interrupted."""
    host = host or config.server.host
    port = port if port is not None else config.server.port
    logger.info("Serving PageRipper on %s:%s", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
