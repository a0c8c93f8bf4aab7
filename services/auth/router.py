"""
services/auth/router.py
Email/password authentication endpoints.
Implements: Register → JWT issue, Login → JWT issue, Me
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.database import get_db
from services.auth import credentials
from shared.middleware.auth import require_user
from shared.models.models import User
from shared.schemas.schemas import (
    ERROR_RESPONSES,
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisteredUserResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from shared.utils.errors import AuthError
from shared.utils.security import create_access_token

router = APIRouter(prefix="/auth", tags=["Authentication"], responses=ERROR_RESPONSES)


# ── Helper ────────────────────────────────────────────────────

def _issue_token(user: User) -> str:
    access_token, _ = create_access_token(
        user_id=str(user.id),
        role=user.role.value,
        email=user.email,
    )
    return access_token


# ── Endpoints ─────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(data: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """
    Create an account and return a JWT for it.
    The configured bootstrap admin email is granted the admin role.
    """
    user = await credentials.create_user(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        phone=data.phone,
    )
    return RegisterResponse(
        message="User registered successfully",
        token=_issue_token(user),
        user=RegisteredUserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse, summary="Login with email and password")
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await credentials.find_by_email(db, data.email)
    if not user or not credentials.verify_password(user, data.password):
        raise AuthError("Invalid credentials")

    return AuthResponse(
        message="Login successful",
        token=_issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse, summary="Get current user")
async def get_me(current_user: User = Depends(require_user)):
    """Returns the authenticated user's profile."""
    return MeResponse(user=UserResponse.model_validate(current_user))
