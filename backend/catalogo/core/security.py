"""Credentials: password hashing, session JWTs, the service key."""

import hmac
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jwt
from passlib.context import CryptContext

from catalogo.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: UUID, role: str, expires_delta: timedelta | None = None) -> str:
    """Session token carrying the user id and platform role.

    Store ownership is not embedded; it is looked up per request.
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": str(user_id), "role": role, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises JWTError when the signature or expiry is bad."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def verify_service_key(candidate: str) -> bool:
    # an unset key never matches
    if not settings.SERVICE_ROLE_KEY:
        return False
    return hmac.compare_digest(candidate.encode(), settings.SERVICE_ROLE_KEY.encode())
