"""Dependency injection for FastAPI endpoints"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from finance_tracker.config import Settings
from finance_tracker.domain.exceptions import TokenError, Unauthenticated
from finance_tracker.domain.models import Identity
from finance_tracker.domain.tokens import TokenService
from finance_tracker.infrastructure.database.repositories import UserRepository, to_identity
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_auth_event
from finance_tracker.infrastructure.observability.metrics import record_auth_event

BEARER_PREFIX = "Bearer "


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_settings(request: Request) -> Settings:
    """Settings the app was created with"""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    """Process-wide token service, built once at startup"""
    return request.app.state.token_service


def get_user_repository(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> UserRepository:
    return UserRepository(db, bcrypt_rounds=settings.bcrypt_rounds)


def _reject(request: Request, reason: str, message: str) -> Unauthenticated:
    record_auth_event("token", reason)
    log_auth_event(get_request_id(request), "token", success=False, reason=reason)
    return Unauthenticated(message)


def get_current_user(
    request: Request,
    token_service: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> Identity:
    """
    Authentication gate for every user-scoped route.

    Flow:
    1. Read "Authorization: Bearer <token>"
    2. Verify signature and expiry
    3. Resolve the subject to a user (without the password hash)
    4. Attach the identity to request.state.user

    Expired, forged and malformed tokens are all reported as "token failed"
    so callers learn nothing about why verification failed.
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        raise _reject(request, "no_token", "Not authorized, no token")

    token = header[len(BEARER_PREFIX):].strip()
    try:
        subject_id = token_service.verify(token)
    except TokenError as e:
        logging.debug(f"Token verification failed: {e}", extra={"request_id": get_request_id(request)})
        raise _reject(request, "token_failed", "Not authorized, token failed") from e

    user = users.get_by_id(subject_id)
    if user is None:
        raise _reject(request, "user_not_found", "Not authorized, user not found")

    identity = to_identity(user)
    request.state.user = identity
    return identity
