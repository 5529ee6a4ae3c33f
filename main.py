"""
FastAPI Application Entry Point

Integrates:
  - Assessment, chat and upload routes
  - Per-client rate limiting
  - Health checks
  - Error boundary converting pipeline failures into responses

Start-up builds the gateway from a validated GatewayConfig. A missing
provider URL or key raises ConfigError from the lifespan, so the server
never reaches its serving state.

Run: uvicorn main:app --host 0.0.0.0 --port 4000
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from api import UPLOADS_MOUNT, assess_router, chat_router, upload_router
from config import Config
from inference import (
    BadUpstreamShapeError,
    ConfigError,
    ParseError,
    ProviderBackend,
    UpstreamError,
)
from infra import GatewayConfig, bootstrap_gateway
from transport.rate_limit import RateLimitMiddleware

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    config: Optional[GatewayConfig] = None,
    backend: Optional[ProviderBackend] = None,
    upload_dir: Optional[str] = None,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Explicit configuration; read from the environment at start-up when omitted.
        backend: Provider backend override (tests, offline runs).
        upload_dir: Where uploaded audio is stored and served from.
        cors_origins: Allowed CORS origins.
    """
    upload_dir = upload_dir or Config.UPLOAD_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: startup and shutdown handlers.
        """
        # Startup
        try:
            gateway = bootstrap_gateway(config, backend)
        except ConfigError as e:
            logger.critical(f"Startup aborted: {e}")
            raise

        os.makedirs(upload_dir, exist_ok=True)
        app.state.gateway = gateway
        app.state.rate_limiter = gateway.rate_limiter
        app.state.trust_proxy = gateway.config.trust_proxy

        logger.info("=" * 60)
        logger.info("Speaking tutor gateway starting up...")
        for key, value in gateway.config.describe().items():
            logger.info(f"{key}: {value}")
        logger.info("=" * 60)

        yield

        # Shutdown
        app.state.gateway = None
        logger.info("Speaking tutor gateway shutting down...")

    app = FastAPI(
        title="Speaking Tutor Gateway",
        description="Speaking assessment and chat tutoring over a remote language model",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.gateway = None
    app.state.rate_limiter = None
    app.state.upload_dir = upload_dir

    # ── Error boundary (request-scoped) ───────────────────────────────────────
    @app.exception_handler(BadUpstreamShapeError)
    async def bad_shape_handler(request: Request, exc: BadUpstreamShapeError):
        logger.warning(f"{request.url.path}: {exc} {exc.details}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": "Model returned unexpected output"},
        )

    @app.exception_handler(ParseError)
    @app.exception_handler(UpstreamError)
    async def upstream_handler(request: Request, exc: Exception):
        logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": str(exc) or "Failed to assess. Please try again later."},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "Internal server error"},
            )

    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or Config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(assess_router)
    app.include_router(chat_router)
    app.include_router(upload_router)
    app.mount(UPLOADS_MOUNT, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    # Health check endpoints
    @app.get("/health/live")
    async def health_live():
        """Live health check (liveness probe)."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness health check: ready once the gateway is wired."""
        if request.app.state.gateway is None:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready"},
            )
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Speaking Tutor Gateway",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "assess": "POST /api/assess",
                "chat": "POST /api/chat",
                "upload": "POST /api/upload",
                "uploads": f"GET {UPLOADS_MOUNT}/<name>",
                "health_live": "GET /health/live",
                "health_ready": "GET /health/ready",
                "config_info": "GET /config/info",
            },
        }

    @app.get("/config/info")
    async def config_info(request: Request):
        """Get non-sensitive configuration info."""
        gateway = request.app.state.gateway
        if gateway is None:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready"},
            )
        return gateway.config.describe()

    return app


app = create_app()


if __name__ == "__main__":
    import sys

    import uvicorn

    # Supervisory boundary: refuse to bind without provider configuration
    try:
        GatewayConfig.from_env()
    except ConfigError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)

    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
