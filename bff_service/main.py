"""
Storefront BFF Gateway - Main Application
Single HTTP entry point in front of the product, order and inventory services
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from bff_service.config import HEALTH_CHECKED_SERVICES, Settings, get_settings
from bff_service.routes import categories, health, inventory, orders, products
from bff_service.services.backend_proxy import BackendProxy
from bff_service.services.health_aggregator import HealthAggregator
from bff_service.utils.envelope import error_response
from bff_service.utils.error_classifier import INTERNAL_ERROR_MESSAGE, ErrorCategory
from bff_service.utils.logger import configure_logging

logger = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "Endpoint not found"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _validation_message(exc: RequestValidationError) -> str:
    for error in exc.errors():
        loc = error.get("loc") or ()
        if loc and loc[0] == "body":
            return "Request body must be a JSON object"
    return "Invalid request parameters"


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the gateway application

    Args:
        settings: Settings to use, defaults to the process-wide settings
        transport: Optional httpx transport shared by every backend proxy
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.logging_config_path)

    backends = {
        name: BackendProxy(target, user_agent=settings.user_agent, transport=transport)
        for name, target in settings.backend_targets().items()
    }
    started_at = time.monotonic()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events"""
        logger.info(
            "Starting BFF gateway",
            environment=settings.node_env,
            port=settings.port,
            backends={name: proxy.target.base_address for name, proxy in backends.items()},
        )
        for proxy in backends.values():
            await proxy.start()

        yield

        for proxy in backends.values():
            await proxy.stop()
        logger.info("BFF gateway shutdown complete")

    app = FastAPI(
        title="Storefront BFF Gateway",
        description="Backend-for-frontend in front of the catalog, cart and inventory services",
        version=settings.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.backends = backends
    app.state.health_aggregator = HealthAggregator(
        {name: backends[name] for name in HEALTH_CHECKED_SERVICES},
        probe_timeout=settings.health_probe_timeout_seconds,
        environment=settings.node_env,
        started_at=started_at,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its status and duration"""
        start = time.perf_counter()
        logger.info("Request started", method=request.method, path=request.url.path)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            logger.info(
                "Route not found",
                method=request.method,
                path=request.url.path,
                category=ErrorCategory.ROUTE_NOT_FOUND.value,
            )
            return JSONResponse(
                status_code=404,
                content={
                    "status": 404,
                    "message": NOT_FOUND_MESSAGE,
                    "path": str(request.url.path) + (f"?{request.url.query}" if request.url.query else ""),
                    "timestamp": _now_iso(),
                },
            )
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info(
            "Request validation failed",
            method=request.method,
            path=request.url.path,
            category=ErrorCategory.VALIDATION_FAILED.value,
            reason=message,
        )
        return error_response(400, message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            category=ErrorCategory.UNCAUGHT_INTERNAL.value,
            exc_info=True,
        )
        content = {
            "status": 500,
            "message": INTERNAL_ERROR_MESSAGE,
            "timestamp": _now_iso(),
        }
        if not settings.is_production:
            content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=500, content=content)

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
    app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
    app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "running",
            "timestamp": _now_iso(),
            "endpoints": {
                "products": "/api/products",
                "orders": "/api/orders",
                "inventory": "/api/inventory",
                "categories": "/api/categories",
                "health": "/health",
            },
        }

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "bff_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
