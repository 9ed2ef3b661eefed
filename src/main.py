"""FastAPI application entry point."""

import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api import auth, groups, pages, templates, uploads, users
from src.api.dependencies import get_upload_manager
from src.config import get_settings
from src.errors import ApiError
from src.schemas.common import ErrorResponse
from src.services.oauth import build_auth_providers

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(level=settings.log_level.upper())
    get_upload_manager().ensure_root()
    app.state.auth_providers = build_auth_providers(settings)
    yield


app = FastAPI(
    title="Page Builder API",
    description="Templates, pages and groups for a link-in-bio page builder",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _error_response(status_code: int, message: str, exc: Exception) -> JSONResponse:
    stack = None
    if not settings.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = ErrorResponse(message=message, stack=stack)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return _error_response(exc.status_code, exc.message, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, "Could not find provided route", exc)
    return _error_response(exc.status_code, str(exc.detail), exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first["loc"] if part != "body")
        message = f"{field}: {first['msg']}" if field else first["msg"]
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, message, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", exc)


# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(templates.router)
app.include_router(pages.router)
app.include_router(groups.router)
app.include_router(uploads.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
