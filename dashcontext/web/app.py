"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashcontext import __version__
from dashcontext.config.logging import setup_logging
from dashcontext.config.settings import get_settings
from dashcontext.web.middleware import RequestIDMiddleware
from dashcontext.web.routes.context import router as context_router
from dashcontext.web.routes.whitelabel import VERIFY_PATH
from dashcontext.web.routes.whitelabel import router as whitelabel_router

logger = structlog.get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title="dashcontext",
        description="Tenant context resolution for agency, client and super-admin dashboards",
        version=__version__,
    )

    # Malformed bodies get the same error shape as missing fields on each route
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
        content: dict[str, object] = {"error": "Invalid request body"}
        if request.url.path == VERIFY_PATH:
            content = {"verified": False, **content}
        return JSONResponse(status_code=400, content=content)

    # Middleware (order matters: last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "X-Client-Info",
            "X-Request-ID",
            "X-Service-Token",
            "Apikey",
        ],
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(context_router)
    app.include_router(whitelabel_router)

    @app.get("/api/health")
    async def health_check() -> dict[str, object]:
        from dashcontext.web.health import check_health

        return await check_health()

    logger.info("app_created", platform_domains=settings.platform_domains)
    return app
