"""Main FastAPI application."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.settings import settings
from app.api.activity import router as activity_router
from app.api.anniversary import router as anniversary_router
from app.api.daily_question import router as daily_question_router
from app.api.pairing import router as pairing_router
from app.domain.common import messages
from app.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from app.infra.db import base as db_base
# Import all models to ensure they're registered with Base
from app.infra.db.models import (  # noqa: F401
    AnswerModel,
    CoupleModel,
    DailyActivityModel,
    DailyPromptModel,
    QuestionHistoryModel,
    QuestionModel,
    QuestionTagModel,
    UserModel,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    engine = db_base.engine
    if engine is not None:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(db_base.Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            # Database might not be ready yet; requests will report it.
            logger.warning("Could not connect to database during startup: %s", e)

    yield

    if engine is not None:
        await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o for o in settings.cors_origins if "*" not in o],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    max_age=3600,
)


def _redacted_headers(request: Request) -> dict:
    headers = dict(request.headers)
    auth_header = headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]
        headers["authorization"] = f"Bearer {token[:12]}..." if len(token) > 12 else "Bearer ***"
    return headers


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logger.info("[SERVER REQUEST] %s %s", request.method, request.url.path)
        logger.debug("   Query params: %s", dict(request.query_params))
        logger.debug("   Headers: %s", _redacted_headers(request))

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            "[SERVER RESPONSE] %s %s - %s (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        return response


# Add logging middleware AFTER CORS (CORS must be first)
app.add_middleware(LoggingMiddleware)


def _envelope(status_code: int, error: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters."""
    errors = exc.errors()
    logger.warning(
        "[VALIDATION ERROR] %s %s: %d error(s) %s",
        request.method,
        request.url.path,
        len(errors),
        [e.get("loc") for e in errors],
    )
    return _envelope(422, messages.INVALID_REQUEST)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Auth failures and framework errors, rendered in the envelope."""
    return _envelope(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


# Domain error handlers: map domain exceptions to HTTP status
DOMAIN_ERROR_STATUS = {
    NotFoundError: 404,
    AuthorizationError: 403,
    ValidationError: 422,
    ConflictError: 409,
    UnavailableError: 503,
}


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Return the mapped status with the error message from the closed vocabulary."""
    status_code = next(
        (code for cls, code in DOMAIN_ERROR_STATUS.items() if isinstance(exc, cls)),
        400,
    )
    message = exc.message if hasattr(exc, "message") else str(exc)
    if status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, status_code, message)
    return _envelope(status_code, message)


# Health check (root and under /v1)
@app.get("/health")
@app.get(f"{settings.api_v1_prefix}/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


# API v1 routes
app.include_router(pairing_router, prefix=settings.api_v1_prefix)
app.include_router(daily_question_router, prefix=settings.api_v1_prefix)
app.include_router(activity_router, prefix=settings.api_v1_prefix)
app.include_router(anniversary_router, prefix=settings.api_v1_prefix)
