"""/api/auth - registration, login and profile endpoints"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import (
    get_current_user,
    get_request_id,
    get_token_service,
    get_user_repository,
)
from finance_tracker.api.v1.schemas import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    RegisterRequest,
)
from finance_tracker.domain.exceptions import NotFound, Unauthenticated
from finance_tracker.domain.models import Identity
from finance_tracker.domain.tokens import TokenService
from finance_tracker.infrastructure.database.repositories import UserRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_auth_event
from finance_tracker.infrastructure.observability.metrics import record_auth_event

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    request_body: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Create an account and return a token for it.

    Returns 400 if the email is already registered; nothing is created then.
    """
    user = users.create_user(
        name=request_body.name,
        email=request_body.email,
        password=request_body.password,
    )
    db.commit()

    user_id = str(user.id)
    record_auth_event("register")
    log_auth_event(get_request_id(request), "register", success=True, user_id=user_id)

    return AuthResponse(id=user_id, name=user.name, email=user.email, token=token_service.issue(user_id))


@router.post("/login", response_model=AuthResponse)
def login_user(
    request_body: LoginRequest,
    request: Request,
    users: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
):
    """Exchange email and password for a token"""
    user = users.authenticate(request_body.email, request_body.password)
    if user is None:
        record_auth_event("login", "bad_credentials")
        log_auth_event(get_request_id(request), "login", success=False, reason="bad_credentials")
        # Same message for unknown email and wrong password
        raise Unauthenticated("Invalid email or password")

    user_id = str(user.id)
    record_auth_event("login")
    log_auth_event(get_request_id(request), "login", success=True, user_id=user_id)

    return AuthResponse(id=user_id, name=user.name, email=user.email, token=token_service.issue(user_id))


@router.get("/profile", response_model=ProfileResponse, response_model_exclude_none=True)
def get_profile(current_user: Identity = Depends(get_current_user)):
    return ProfileResponse(
        name=current_user.name,
        email=current_user.email,
        university=current_user.university,
        address=current_user.address,
    )


@router.put("/profile", response_model=ProfileUpdateResponse, response_model_exclude_none=True)
def update_profile(
    request_body: ProfileUpdateRequest,
    request: Request,
    current_user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Update name, email, university, address or password.

    name, email and password can't be cleared; an explicit null for them is ignored.
    """
    user = users.get_by_id(current_user.id)
    if user is None:
        raise NotFound("User not found")

    changes = request_body.model_dump(exclude_unset=True)
    for field in ("name", "email", "password"):
        if changes.get(field) is None:
            changes.pop(field, None)

    users.update_profile(user, changes)
    db.commit()
    db.refresh(user)

    user_id = str(user.id)
    log_auth_event(get_request_id(request), "profile_update", success=True, user_id=user_id)

    return ProfileUpdateResponse(
        id=user_id,
        name=user.name,
        email=user.email,
        university=user.university,
        address=user.address,
        token=token_service.issue(user_id),
    )
