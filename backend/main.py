# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import os
import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.scheduler import setup_scheduler, shutdown_scheduler
from core.sentry_config import init_sentry
from helpers.rate_limiter import limiter
from models.config import settings
from models.exceptions import (
    AlreadyExistsException,
    AuthenticationException,
    ConflictException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    StorageException,
    TooManyAttemptsException,
    ValidationException,
)
from repositories.database import Base, SessionLocal, engine
from routers import (
    auth_router,
    categories_router,
    comments_router,
    notifications_router,
    posts_router,
    reports_router,
    users_router,
    votes_router,
)
from services.category_service import CategoryService
from services.login_throttle import LoginThrottle

# Initialize Sentry BEFORE app creation
init_sentry()

# Configure logging with Loguru
configure_logging(os.getenv("ENVIRONMENT", "development"))


def init_database() -> None:
    """Create tables and seed the default categories."""
    if settings.DATABASE_URL.startswith("sqlite:///"):
        db_path = settings.DATABASE_URL.removeprefix("sqlite:///")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    logger.info("AUTO_CREATE_DB enabled; creating database tables via create_all()")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        added = CategoryService.seed_defaults(db, settings.DEFAULT_CATEGORIES)
        if added:
            logger.info(f"Seeded {added} default categories")
    finally:
        db.close()


def create_login_throttle() -> LoginThrottle:
    return LoginThrottle(
        max_failures=settings.LOGIN_MAX_FAILED_ATTEMPTS,
        window=timedelta(minutes=settings.LOGIN_FAILURE_WINDOW_MINUTES),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Optionally create tables and seed categories when `AUTO_CREATE_DB` is set.
    - Create the process-wide login throttle.
    - Start the expired-session sweep (not in tests).
    """
    if settings.AUTO_CREATE_DB:
        init_database()
    else:
        logger.info("AUTO_CREATE_DB disabled; skipping automatic create_all()")

    # Tests may install their own throttle before startup
    if getattr(app.state, "login_throttle", None) is None:
        app.state.login_throttle = create_login_throttle()

    if settings.ENVIRONMENT != "test":
        setup_scheduler(app.state.login_throttle)

    try:
        yield
    finally:
        if settings.ENVIRONMENT != "test":
            shutdown_scheduler()


app = FastAPI(title="Forum API", lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        )
        set_correlation_id(correlation_id)
        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        logger.info(
            f"{request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )
        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


# Middleware runs in reverse order of registration
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # Session cookie must cross origins for the frontend
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    request: Request,
    exc: DomainException,
    status_code: int,
    label: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)

    logger.warning(
        f"{label}: {exc.message}",
        correlation_id=exc.correlation_id,
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "correlation_id": exc.correlation_id,
        },
        headers=headers,
    )


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # repr() escapes curly braces that loguru would treat as placeholders
    logger.exception(
        f"Unhandled exception: {exc!r}",
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "correlation_id": correlation_id,
        },
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database errors that escaped the services: log, report, hide details."""
    return await unhandled_exception_handler(request, exc)


# Centralized exception handlers
@app.exception_handler(NotFoundException)
async def not_found_exception_handler(
    request: Request, exc: NotFoundException
) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "Not found")


@app.exception_handler(AlreadyExistsException)
async def already_exists_exception_handler(
    request: Request, exc: AlreadyExistsException
) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "Already exists")


@app.exception_handler(ValidationException)
async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    return _error_response(
        request, exc, status.HTTP_400_BAD_REQUEST, "Validation error"
    )


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_403_FORBIDDEN, "Permission denied")


@app.exception_handler(AuthenticationException)
async def authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    """Failed logins and missing/expired sessions. Never carries the token."""
    return _error_response(
        request, exc, status.HTTP_401_UNAUTHORIZED, "Authentication failed"
    )


@app.exception_handler(ConflictException)
async def conflict_exception_handler(
    request: Request, exc: ConflictException
) -> JSONResponse:
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "Conflict")


@app.exception_handler(TooManyAttemptsException)
async def too_many_attempts_handler(
    request: Request, exc: TooManyAttemptsException
) -> JSONResponse:
    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
    return _error_response(
        request,
        exc,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Login throttled",
        headers=headers,
    )


@app.exception_handler(StorageException)
async def storage_exception_handler(
    request: Request, exc: StorageException
) -> JSONResponse:
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.capture_exception(exc)
    logger.error(
        f"Storage error: {exc.message}",
        correlation_id=exc.correlation_id,
        path=str(request.url.path),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "correlation_id": exc.correlation_id,
        },
    )


@app.exception_handler(DomainException)
async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    """Handle generic domain exceptions with Sentry integration."""
    sentry_sdk.capture_exception(exc)
    return _error_response(
        request, exc, status.HTTP_400_BAD_REQUEST, "Domain exception"
    )


# Include routers
app.include_router(auth_router.router, prefix="/api")
app.include_router(posts_router.router, prefix="/api")
app.include_router(comments_router.router, prefix="/api")
app.include_router(votes_router.router, prefix="/api")
app.include_router(notifications_router.router, prefix="/api")
app.include_router(reports_router.router, prefix="/api")
app.include_router(categories_router.router, prefix="/api")
app.include_router(users_router.router, prefix="/api")


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "healthy"}
