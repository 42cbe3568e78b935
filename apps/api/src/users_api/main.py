"""Main FastAPI application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from users_common.models.outcome import ErrorKind, UserError
from users_common.services.user_service import INTERNAL_ERROR_MESSAGE

from users_api.config import get_settings
from users_api.errors import error_response
from users_api.middleware import REQUEST_ID_HEADER, get_cors_headers, setup_middleware
from users_api.routes import api_router, users_router
from users_api.services.store_init import initialize_document_store

# Initialize settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Handle application lifespan events."""
    logger.info(f"{settings.app_name} v{settings.app_version} started")
    logger.info(f"Environment: {settings.environment}")

    await initialize_document_store(settings)

    yield

    logger.info(f"{settings.app_name} shutting down")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="REST API for user documents in a revisioned document store",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api-docs",
    openapi_url="/api-docs/openapi.json",
    redoc_url=None,
    redirect_slashes=False,
)

setup_middleware(app, ui_url=settings.ui_url, environment=settings.environment)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as validation errors."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return error_response(UserError(kind=ErrorKind.VALIDATION, message=problems or "Invalid request"))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors such as unknown paths or methods in the API error shape."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        kind = ErrorKind.NOT_FOUND
    elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        kind = ErrorKind.VALIDATION
    else:
        kind = ErrorKind.INTERNAL
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "kind": kind.value},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn anything that escaped a handler into a generic 500."""
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)

    # Runs outside the CORS middleware
    headers = get_cors_headers(
        request.headers.get("origin"), ui_url=settings.ui_url, environment=settings.environment
    )
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE, "kind": ErrorKind.INTERNAL.value},
        headers=headers,
    )


# Include routers
app.include_router(users_router)
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "users_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
