# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

Used by the middleware layer (HTTP request auth), the login route, and the
background registration task, which runs outside the request lifecycle.
"""

from datetime import UTC, datetime, timedelta

import jwt
from db.enums import UserRole
from passlib.context import CryptContext

from .config import settings

# bcrypt>=5 is incompatible with passlib
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a password, treating malformed stored hashes as a mismatch."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    user_id: str,
    email: str,
    role: UserRole,
    name: str = "",
    expires_minutes: int | None = None,
) -> str:
    """Issue a signed access token for a logged-in user."""
    now = datetime.now(UTC)
    lifetime = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "role": role.value,
        "iss": settings.JWT_ISSUER,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
