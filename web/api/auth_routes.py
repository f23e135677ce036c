"""Auth API routes: register, login, forgot password, current user."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import User, get_async_session
from web.api.validation import (
    validate_forgot_password,
    validate_login,
    validate_registration,
    validated_body,
)
from web.auth import (
    AuthUser,
    authenticate_credentials,
    create_access_token,
    get_current_user,
    hash_password,
    require_user,
    user_exists,
)

logger = logging.getLogger("lolstats.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str  # username or e-mail
    password: str


class RegisterRequest(BaseModel):
    username: str
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class UserInfo(BaseModel):
    username: str
    email: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserInfo


class ForgotPasswordResponse(BaseModel):
    message: str
    email: str


def _auth_response(message: str, user: User) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(user),
        user=UserInfo(username=user.username, email=user.email),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(validated_body(validate_registration))],
)
async def register(body: RegisterRequest, session: AsyncSession = Depends(get_async_session)):
    """Create an account and return a JWT."""
    username = body.username.strip()
    email = str(body.email).lower()
    if await user_exists(session, username, email):
        raise HTTPException(400, "User already exists")
    user = User(username=username, email=email, password_hash=hash_password(body.password))
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name/e-mail
        await session.rollback()
        raise HTTPException(400, "User already exists")
    await session.refresh(user)
    logger.info("Registered user %s (id %d)", user.username, user.id)
    return _auth_response("Registration successful", user)


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(validated_body(validate_login))],
)
async def login(body: LoginRequest, session: AsyncSession = Depends(get_async_session)):
    """Authenticate by username or e-mail and return a JWT."""
    user = await authenticate_credentials(session, body.username.strip(), body.password)
    if not user:
        raise HTTPException(401, "Invalid credentials")
    return _auth_response("Login successful", user)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    dependencies=[Depends(validated_body(validate_forgot_password))],
)
async def forgot_password(body: ForgotPasswordRequest):
    """Acknowledge a password reset request. No mail is sent."""
    email = str(body.email)
    logger.info("Forgot password request for email: %s", email)
    return ForgotPasswordResponse(message="Password reset instructions sent", email=email)


@router.get("/me", response_model=AuthUser)
async def get_me(user: AuthUser = Depends(require_user)):
    """Get current authenticated user."""
    return user


@router.get("/me/optional")
async def get_me_optional(user: Optional[AuthUser] = Depends(get_current_user)):
    """Get current user if logged in, else null. For frontend auth check."""
    return user
