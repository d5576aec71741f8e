# This project was developed with assistance from AI tools.
"""Login credential checks."""

import logging

from db import User, UserStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.auth import verify_password
from .registration import normalize_email

logger = logging.getLogger(__name__)


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    """The active user matching the credentials, or None."""
    stmt = (
        select(User)
        .options(selectinload(User.worker_profile), selectinload(User.client_profile))
        .where(User.email == normalize_email(email))
    )
    result = await session.execute(stmt)
    user = result.unique().scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        return None
    if user.status != UserStatus.ACTIVE:
        logger.info("Login refused for %s user %s", user.status.value, user.id)
        return None
    return user


def display_name(user: User) -> str:
    profile = user.worker_profile or user.client_profile
    if profile is not None:
        return f"{profile.first_name} {profile.last_name}".strip()
    return user.email
