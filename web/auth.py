"""Authentication for web API: JWT, password hashing, identity dependencies."""
from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header, HTTPException, status
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

import config
from tracker.models import User

logger = logging.getLogger("lolstats.auth")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class AuthenticationError(Exception):
    """Token missing, malformed, badly signed or expired. The message is the reason."""


class AuthUser(BaseModel):
    """Identity carried in the token."""

    id: int
    username: str
    email: str


def _prepare_password(password: str) -> str:
    """Bcrypt has a 72-byte limit. Pre-hash longer passwords with SHA256."""
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        return hashlib.sha256(encoded).hexdigest()
    return password


def hash_password(password: str) -> str:
    return pwd_context.hash(_prepare_password(password))


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(_prepare_password(plain), hashed)


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(hours=config.JWT_EXPIRE_HOURS)
    payload = {"sub": str(user.id), "username": user.username, "email": user.email, "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> AuthUser:
    """Verify signature and expiry and return the embedded identity."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")
    try:
        return AuthUser(id=int(payload["sub"]), username=payload["username"], email=payload["email"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token")


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an `Authorization: Bearer <token>` header value.

    Parsed by hand rather than with HTTPBearer, which reports a missing header
    and a non-Bearer scheme the same way.
    """
    if not authorization:
        raise AuthenticationError("Authorization header missing")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthenticationError("Invalid authorization format. Expected: Bearer [token]")
    return parts[1]


def _authenticate(authorization: Optional[str], x_auth_token: Optional[str]) -> AuthUser:
    # X-Auth-Token is a fallback for proxies that strip Authorization
    if not authorization and x_auth_token:
        return decode_token(x_auth_token)
    return decode_token(extract_bearer_token(authorization))


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token"),
) -> Optional[AuthUser]:
    """Return identity from the token, or None if absent or invalid. Never rejects."""
    if not authorization and not x_auth_token:
        return None
    try:
        return _authenticate(authorization, x_auth_token)
    except AuthenticationError as e:
        logger.info("Optional auth: %s", e)
        return None


async def require_user(
    authorization: Optional[str] = Header(None),
    x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token"),
) -> AuthUser:
    """Require a valid token. Raises 401 with the failure reason otherwise."""
    try:
        return _authenticate(authorization, x_auth_token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def find_user(session: AsyncSession, login: str) -> Optional[User]:
    """Look up a user by username or e-mail. E-mails are stored lowercased."""
    result = await session.execute(select(User).where(or_(User.username == login, User.email == login.lower())))
    return result.scalars().first()


async def user_exists(session: AsyncSession, username: str, email: str) -> bool:
    result = await session.execute(select(User.id).where(or_(User.username == username, User.email == email)))
    return result.first() is not None


async def authenticate_credentials(session: AsyncSession, login: str, password: str) -> Optional[User]:
    """Return the user if login (username or e-mail) and password match."""
    user = await find_user(session, login)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user
