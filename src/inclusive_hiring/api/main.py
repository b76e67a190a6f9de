"""Main FastAPI application for the Inclusive Hiring marketplace."""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from inclusive_hiring import __version__
from inclusive_hiring.config import settings
from inclusive_hiring.core.errors import MarketplaceError
from inclusive_hiring.demo.scenarios import seed_demo_data
from inclusive_hiring.service import MarketplaceService, create_service
from inclusive_hiring.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from inclusive_hiring.api.routes import all_routers
from inclusive_hiring.api.models import ErrorResponse
import inclusive_hiring.api.routes as routes_module

# Configure logging
configure_logging()
logger = get_logger(__name__)


def _error_body(error: str, message: str, details=None) -> dict:
    return jsonable_encoder(ErrorResponse(
        error=error,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc)
    ))


def create_app(service: Optional[MarketplaceService] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: Pre-built service (tests inject one); a fresh in-memory
            service is created at startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Inclusive Hiring API")

        marketplace = service or create_service()
        if service is None and settings.seed_demo_data:
            await seed_demo_data(marketplace)
        routes_module.service = marketplace
        logger.info("Application startup completed successfully")

        yield

        logger.info("Shutting down Inclusive Hiring API")
        routes_module.service = None

    app = FastAPI(
        title="Inclusive Hiring API",
        description="Accessible job catalog, application lifecycle and employer dashboards",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    for router in all_routers:
        app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "name": "Inclusive Hiring API",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled"
        }

    return app


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    if settings.allowed_hosts:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=settings.allowed_hosts
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = asyncio.get_running_loop().time()
        bind_request_context(request_id=uuid.uuid4().hex, path=request.url.path)

        logger.info(
            "Request started",
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                duration_seconds=asyncio.get_running_loop().time() - start_time
            )
            clear_request_context()
            raise

        logger.info(
            "Request completed",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            duration_seconds=asyncio.get_running_loop().time() - start_time
        )
        clear_request_context()
        return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_exception_handler(request: Request, exc: MarketplaceError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Marketplace error",
            error=exc.code,
            message=exc.message,
            status_code=exc.status_code,
            url=str(request.url)
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.details or None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error",
            errors=exc.errors(),
            url=str(request.url)
        )

        return JSONResponse(
            status_code=422,
            content=_error_body(
                "validation_error",
                "Request validation failed",
                {"validation_errors": jsonable_encoder(exc.errors())}
            )
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            url=str(request.url)
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("http_error", str(exc.detail or "HTTP error"))
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            url=str(request.url)
        )

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_error",
                "An unexpected error occurred",
                {"error_type": type(exc).__name__} if settings.debug else None
            )
        )


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inclusive_hiring.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.reload,
        log_config=None  # Use our custom logging
    )
