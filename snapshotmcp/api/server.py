"""FastAPI front-end for the MCP gateway.

Routes: GET /health, OPTIONS on any path, POST /mcp and /mcp/. Everything
else is a plain-text 404. Permissive CORS headers go on every response.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from snapshotmcp import __version__
from snapshotmcp.api.rpc.dispatcher import McpDispatcher
from snapshotmcp.api.rpc.envelope import error_response
from snapshotmcp.config.schema import Config
from snapshotmcp.context import GatewayContext, build_context
from snapshotmcp.utils.exceptions import InvalidRequestError
from snapshotmcp.utils.helpers import utc_now_iso

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept, Authorization",
}


def create_app(config: Optional[Config] = None, *, context: Optional[GatewayContext] = None) -> FastAPI:
    """
    Build the application.

    With `context` given the caller owns it (tests); otherwise one is built
    from `config` at startup and closed at shutdown.
    """
    config = context.config if context is not None else (config or Config())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = context is None
        ctx = build_context(config) if owned else context
        app.state.context = ctx
        app.state.dispatcher = McpDispatcher(ctx)
        logger.info("Snapshot MCP gateway ready, hub {}", config.hub.hub_url)
        try:
            yield
        finally:
            if owned:
                await ctx.aclose()
            logger.info("Snapshot MCP gateway stopped")

    app = FastAPI(
        title=config.server.server_name,
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "server": config.server.server_name,
            "version": __version__,
            "upstream_endpoint": config.hub.hub_url,
            "timestamp": utc_now_iso(),
        }

    @app.options("/{path:path}")
    async def preflight(path: str):
        return Response(status_code=200)

    async def mcp_endpoint(request: Request):
        raw = await request.body()
        try:
            payload = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("Undecodable MCP body: {}", e)
            return JSONResponse(error_response(None, InvalidRequestError(f"Parse error: {e}")))

        response = await request.app.state.dispatcher.handle(payload)
        if response is None:
            return Response(status_code=200)
        return JSONResponse(response)

    app.add_api_route("/mcp", mcp_endpoint, methods=["POST"])
    app.add_api_route("/mcp/", mcp_endpoint, methods=["POST"])

    return app


def run_server(config: Config, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the HTTP gateway."""
    uvicorn.run(
        create_app(config),
        host=host or config.server.host,
        port=port or config.server.port,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=10,
        log_level="warning",
    )
