"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from cookdobby.api.routes import health, recipe
from cookdobby.config import settings
from cookdobby.core.request_id import get_request_id
from cookdobby.middleware.logging import RequestLoggingMiddleware
from cookdobby.middleware.rate_limit import get_rate_limit_exceeded_handler, limiter
from cookdobby.middleware.security import SecurityHeadersMiddleware, setup_compression, setup_cors
from cookdobby.utils.exceptions import (
    BadRequest,
    ConfigurationError,
    CookDobbyException,
    NetworkFailure,
)
from cookdobby.utils.logging_config import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration; the provider credential is checked here once."""
    logger.info("Cook Dobby API starting up...")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Default model: {settings.fireworks_model}")
    if not settings.provider_configured:
        logger.error("FIREWORKS_API_KEY is not set; generate requests will fail with 500")
    yield
    logger.info("Cook Dobby API shutting down...")


app = FastAPI(
    title="Cook Dobby API",
    description="Recipe ideas and detailed recipes generated by an LLM",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, get_rate_limit_exceeded_handler())


def status_code_for(exc: CookDobbyException) -> int:
    """HTTP status a failure is surfaced with."""
    if isinstance(exc, BadRequest):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, (ConfigurationError, NetworkFailure)):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if type(exc) is CookDobbyException:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    # Provider, transport, extraction and shape failures
    return status.HTTP_502_BAD_GATEWAY


@app.exception_handler(CookDobbyException)
async def cookdobby_exception_handler(request: Request, exc: CookDobbyException) -> JSONResponse:
    """Render generate failures as ``{error, details?, raw?, parsed?}``."""
    status_code = status_code_for(exc)
    request_id = get_request_id()

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Exception: {exc.error}",
        extra={
            "request_id": request_id,
            "failure": type(exc).__name__,
            "status_code": status_code,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content={**exc.to_dict(), "request_id": request_id},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    request_id = get_request_id()

    logger.error(
        f"Unexpected exception: {str(exc)}",
        extra={"request_id": request_id},
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "details": "An unexpected error occurred",
            "request_id": request_id,
        },
    )


# Added in reverse: logging runs outermost so every response carries X-Request-ID.
app.add_middleware(SecurityHeadersMiddleware)
setup_compression(app)
setup_cors(app)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router)
app.include_router(recipe.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Cook Dobby API",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cookdobby.main:app", host=settings.host, port=settings.port)
