"""
Authentication dependencies for FastAPI
Provides JWT token validation and admin user extraction
"""

from typing import Optional
import jwt
from fastapi import Depends, Header, HTTPException, status

from app.core.config import config
from app.core.logger import logger
from app.models.user import User

UNAUTHORIZED_DETAIL = "Access unauthorized"


class AuthError(Exception):
    """Custom authentication error"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHORIZED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthError: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token: {e}")


async def get_current_user(authorization: Optional[str] = Header(None)) -> User:
    """
    Dependency to extract and validate current user from JWT token.
    Raises 401 if authentication fails.
    """
    if not authorization:
        logger.warning("Authentication required: No token provided")
        raise _unauthorized()

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        logger.warning("Invalid authorization header format")
        raise _unauthorized()

    try:
        payload = decode_jwt(token)
    except AuthError as e:
        logger.warning(f"Authentication failed: {e.message}")
        raise _unauthorized()

    user = User.from_claims(payload)
    logger.debug(f"Authentication successful for user: {user.id}")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Dependency to require admin role.
    A valid token without the admin role is rejected like a missing one.
    """
    if not user.is_admin():
        logger.warning(f"Admin access denied for user: {user.id}")
        raise _unauthorized()
    return user
