"""FastAPI entrypoint for the task index service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskpaper.config import load_config
from taskpaper.errors import ErrorResponse, ToolError, error_response
from taskpaper.logging_setup import setup_logging
from taskpaper.mcp import register_mcp_handlers
from taskpaper.snapshot import SnapshotStore

SERVICE_TOKEN_HEADER = "X-Taskpaper-Service-Token"
AUTH_EXEMPT_PATHS = {"/health"}

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = load_config()
        setup_logging(config.log_level)
        app.state.config = config
        app.state.library_path = config.library_path
        app.state.snapshots = SnapshotStore()
        logger.info("Serving documents from %s", config.library_path)
        yield

    app = FastAPI(lifespan=lifespan)

    @app.middleware("http")
    async def enforce_service_token(request: Request, call_next):
        if request.url.path in AUTH_EXEMPT_PATHS:
            return await call_next(request)

        config = getattr(request.app.state, "config", None)
        service_token = getattr(config, "service_token", None)
        if service_token and request.headers.get(SERVICE_TOKEN_HEADER) != service_token:
            error = ErrorResponse(
                code="AUTH_FORBIDDEN",
                message="Invalid service token.",
                details={"header": SERVICE_TOKEN_HEADER},
            )
            return JSONResponse(status_code=403, content=error_response(error))

        return await call_next(request)

    @app.exception_handler(ToolError)
    def handle_tool_error(request: Request, exc: ToolError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=error_response(exc.error)
        )

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    register_mcp_handlers(app)
    return app


def serve() -> None:
    """Run the service with uvicorn on the configured host and port."""
    config = load_config()
    uvicorn.run(
        "taskpaper.main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    serve()
