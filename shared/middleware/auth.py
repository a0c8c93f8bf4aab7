"""
shared/middleware/auth.py
FastAPI dependency functions for authentication and authorization.
JWT is validated here; role checks all go through is_authorized().
"""

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.database import get_db
from shared.models.models import User, UserRole
from shared.utils.errors import AuthError, ForbiddenError
from shared.utils.security import verify_access_token

security = HTTPBearer(auto_error=False)

# Higher rank satisfies every requirement of a lower one
_ROLE_RANK = {
    UserRole.USER: 1,
    UserRole.ADMIN: 2,
}


def is_authorized(actor_role: UserRole, required_role: UserRole) -> bool:
    """Authorization policy: may an actor with ``actor_role`` use a ``required_role`` route?"""
    return _ROLE_RANK.get(UserRole(actor_role), 0) >= _ROLE_RANK[UserRole(required_role)]


class TokenData:
    def __init__(self, payload: dict):
        self.user_id: str = payload["sub"]
        self.role: UserRole = UserRole(payload["role"])
        self.email: str = payload["email"]
        self.jti: str = payload["jti"]


async def get_token_data(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenData:
    """Extract and validate JWT from Authorization header."""
    if not credentials:
        raise AuthError("Authentication required")

    try:
        payload = verify_access_token(credentials.credentials)
        return TokenData(payload)
    except (JWTError, KeyError, ValueError):
        raise AuthError("Invalid or expired token")


async def get_current_user(
    token_data: TokenData = Depends(get_token_data),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Load full User object from database using JWT sub claim."""
    try:
        user_id = uuid.UUID(token_data.user_id)
    except ValueError:
        raise AuthError("Invalid or expired token")

    user = await db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise AuthError("User not found")
    return user


class RoleRequired:
    """Dependency factory for role-based access control."""

    def __init__(self, role: UserRole):
        self.role = role

    async def __call__(
        self,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not is_authorized(current_user.role, self.role):
            raise ForbiddenError(f"Required role: {self.role.value}")
        return current_user


# Convenience role dependencies
require_user = RoleRequired(UserRole.USER)
require_admin = RoleRequired(UserRole.ADMIN)
