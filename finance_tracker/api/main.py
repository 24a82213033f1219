"""FastAPI application factory

Run with:
    uvicorn finance_tracker.api.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from finance_tracker.api.dependencies import get_request_id
from finance_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_tracker.api.v1 import auth, transactions
from finance_tracker.config import Settings, get_settings
from finance_tracker.domain.exceptions import (
    BadRequest,
    Conflict,
    DomainException,
    Forbidden,
    NotFound,
    Unauthenticated,
)
from finance_tracker.domain.tokens import TokenService
from finance_tracker.infrastructure.database.models import Base
from finance_tracker.infrastructure.database.session import build_engine, build_session_factory
from finance_tracker.infrastructure.observability.logging import setup_logging

# Duplicate registration is reported as a plain 400, like any other bad request
STATUS_BY_EXCEPTION: Dict[Type[DomainException], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    BadRequest: status.HTTP_400_BAD_REQUEST,
    Conflict: status.HTTP_400_BAD_REQUEST,
}


def _status_for(exc: DomainException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION.items():
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic errors into the single message clients expect"""
    errors = exc.errors()
    missing = [str(err["loc"][-1]) for err in errors if err.get("type") == "missing"]
    if missing:
        return "Missing required fields: " + ", ".join(missing)
    if not errors:
        return "Invalid request body"
    first = errors[0]
    field = first["loc"][-1] if first.get("loc") else None
    # Unparseable JSON reports a character offset, not a field
    if first.get("type") == "json_invalid" or not isinstance(field, str) or field == "body":
        return "Invalid request body"
    return f"Invalid {field}: {first['msg']}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        status_code = _status_for(exc)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=status_code, content={"message": str(exc)}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        # Uncommitted work is rolled back when get_db closes the session
        logging.error(f"Database error: {exc}", extra={"request_id": get_request_id(request)})
        message = str(getattr(exc, "orig", None) or exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": message},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Process-wide state (settings, engine, token service) is built here once
    and stored on app.state; handlers only read it.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.service_name)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        logging.info("Database schema ready")
        yield
        engine.dispose()

    app = FastAPI(
        title="Personal Finance Tracker",
        description="Income and expense tracking for authenticated users",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(days=settings.token_ttl_days),
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(transactions.income_router, prefix="/api/income", tags=["income"])
    app.include_router(transactions.expense_router, prefix="/api/expense", tags=["expense"])

    return app
