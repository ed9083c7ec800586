"""Authentication service for user management and JWT tokens."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Annotated

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher

from zuq.config import settings
from zuq.models.base import utcnow
from zuq.models.user import User

# Security event logger
security_logger = logging.getLogger("zuq.security")

# Password hashing using pwdlib with Argon2
password_hash = PasswordHash((Argon2Hasher(),))

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return password_hash.hash(password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


async def get_user_by_login(login: str) -> User | None:
    """Find a user by email or username."""
    user = await User.find_one(User.email == login)
    if user is None:
        user = await User.find_one(User.username == login)
    return user


async def authenticate_user(
    login: str,
    password: str,
    ip_address: str | None = None,
) -> User | None:
    """Authenticate a user with email (or username) and password.

    Returns:
        User if authentication successful, None otherwise.
    """
    user = await get_user_by_login(login)
    if not user:
        security_logger.warning(
            "Failed login - user not found: login=%s, ip=%s", login, ip_address or "unknown"
        )
        return None

    if not verify_password(password, user.hashed_password):
        security_logger.warning(
            "Failed login - invalid password: user_id=%s, ip=%s",
            str(user.id),
            ip_address or "unknown",
        )
        return None

    if not user.is_active:
        security_logger.warning(
            "Failed login - inactive account: user_id=%s, ip=%s",
            str(user.id),
            ip_address or "unknown",
        )
        return None

    user.last_login = utcnow()
    await user.save()
    security_logger.info("Successful login: user_id=%s, ip=%s", str(user.id), ip_address or "unknown")
    return user


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> User | None:
    """Get the current user from the JWT token (subject is the user id)."""
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None

    subject: str | None = payload.get("sub")
    if subject is None:
        return None

    try:
        user = await User.get(PydanticObjectId(subject))
    except InvalidId:
        return None

    if user is None or not user.is_active:
        return None
    return user


async def require_auth(
    user: Annotated[User | None, Depends(get_current_user)],
) -> User:
    """Require authentication - raises 401 if not authenticated."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# Type alias for dependency injection
RequireAuth = Annotated[User, Depends(require_auth)]
