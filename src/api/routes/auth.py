"""Authentication routes.

This module handles HTTP endpoints for user authentication and registration,
and provides the ``get_current_user`` dependency every protected route uses.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    User,
)
from utils.user_manager import UserAlreadyExistsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# auto_error=False so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(pytz.utc) + expires_delta})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Verify JWT token from Authorization header.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent.

    Returns:
        Decoded token payload.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired.
    """
    if credentials is None:
        raise _unauthorized()
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError:
        raise _unauthorized()
    if payload.get("sub") is None:
        raise _unauthorized()
    return payload


def get_current_user(
    user_manager: UserManagerDep,
    token_payload: dict = Depends(verify_token),
) -> User:
    """Get current authenticated user.

    Args:
        user_manager: Injected UserManager instance.
        token_payload: Decoded JWT token payload.

    Returns:
        Current User object.

    Raises:
        HTTPException: 401 if the token's user no longer exists.
    """
    user = user_manager.get_user_by_username(token_payload["sub"])
    if user is None:
        raise _unauthorized()
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="用户注册")
def register(
    req: RegisterRequest,
    user_manager: UserManagerDep,
) -> dict:
    """Register a new user.

    Args:
        req: Registration request with username, password, etc.
        user_manager: Injected UserManager instance.

    Returns:
        Dictionary with success message and user_id.

    Raises:
        HTTPException: 400 on blank credentials, 409 if the username is taken.
    """
    username = req.username.strip()
    if not username or not req.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required.",
        )

    try:
        user = user_manager.create_user(
            username=username,
            password=req.password,
            display_name=req.display_name,
            email=req.email,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return {
        "success": True,
        "message": "User registered successfully",
        "user_id": user.user_id,
    }


@router.post("/login", response_model=LoginResponse, summary="用户登录")
def login(
    req: LoginRequest,
    user_manager: UserManagerDep,
) -> LoginResponse:
    """Login with username and password.

    Args:
        req: Login request with username and password.
        user_manager: Injected UserManager instance.

    Returns:
        LoginResponse with user information and JWT token.

    Raises:
        HTTPException: 401 if the credentials do not match.
    """
    user = user_manager.get_user_by_username(req.username.strip())
    if user is None or not user_manager.verify_password(req.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    access_token = create_access_token(data={"sub": user.username})
    logger.info("User logged in: %s", user.username)
    return LoginResponse(user=user.public_dict(), token=access_token)


@router.get("/me", response_model=CurrentUserResponse, summary="获取当前用户信息")
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    """Get current authenticated user information."""
    return CurrentUserResponse(user=current_user.public_dict())
