"""
services/auth/credentials.py
Credential store: user lookup, password verification and registration.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from shared.models.models import User, UserRole
from shared.utils.errors import ConflictError
from shared.utils.security import hash_password, verify_password as check_password

logger = logging.getLogger(__name__)


def role_for_email(email: str) -> UserRole:
    """The configured bootstrap address registers as admin; everyone else as user."""
    if email == settings.BOOTSTRAP_ADMIN_EMAIL.lower():
        return UserRole.ADMIN
    return UserRole.USER


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    return await db.scalar(select(User).where(User.email == email))


def verify_password(user: User, plaintext: str) -> bool:
    return check_password(plaintext, user.password_hash)


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    phone: str,
) -> User:
    """
    Register a new user with a hashed password.
    Raises ConflictError if the email is already taken.
    """
    if await find_by_email(db, email):
        raise ConflictError("User already exists")

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        phone=phone,
        role=role_for_email(email),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise ConflictError("User already exists")

    logger.info(f"Registered user {user.id} with role {user.role.value}")
    return user
