"""
CMS admin API main application.
Entry point for the FastAPI REST server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from cms_api.models import Base
from cms_api.routers import admin_router, public_router, security_router
from cms_api.services import ActionResult
from shared.config.settings import settings
from shared.config.logging import setup_logging, cms_api_logger as logger
from shared.infrastructure.correlation import CorrelationIdMiddleware
from shared.infrastructure.db import engine
from shared.security.rate_limit import limiter
from shared.utils.exceptions import AppException, RateLimitError, ValidationError, field_errors_from


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()

    secret_errors = settings.validate_production_secrets()
    if secret_errors:
        for error in secret_errors:
            logger.error("Configuration error", error=error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(secret_errors)}. "
                "Server will not start with insecure configuration."
            )
        logger.warning("Running with insecure defaults (acceptable for development only)")

    logger.info("Starting CMS API", port=settings.rest_api_port, env=settings.environment)

    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down CMS API")
    engine.dispose()


app = FastAPI(
    title="Optique CMS API",
    description="Back-office API for the store website content and records",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter


# =============================================================================
# Error rendering: every failure uses the ActionResult shape
# =============================================================================


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Gate failures raised by dependencies (authentication, permission, CSRF)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ActionResult.fail(exc).model_dump(mode="json"),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        "Invalid request data",
        field_errors=field_errors_from(exc.errors()),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=error.status_code,
        content=ActionResult.fail(error).model_dump(mode="json"),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    error = RateLimitError(str(exc.detail), path=request.url.path)
    return JSONResponse(
        status_code=error.status_code,
        content=ActionResult.fail(error).model_dump(mode="json"),
    )


# Middleware (last added runs first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", settings.csrf_header_name, CorrelationIdMiddleware.HEADER_NAME],
    expose_headers=[CorrelationIdMiddleware.HEADER_NAME],
)
app.add_middleware(CorrelationIdMiddleware)


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "cms-api",
        "environment": settings.environment,
    }


app.include_router(security_router)
app.include_router(public_router)
app.include_router(admin_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cms_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )
