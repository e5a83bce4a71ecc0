"""
Authentication Dependencies for diagramiq

Provides FastAPI dependencies for:
- HS256 JWT verification
- User authentication
- Supervisor authorization

Tokens carry the user id (`id`, or the standard `sub` claim) and the role.
The role is always re-read from the database, never trusted from the token.

Usage:
    @router.get("/protected")
    def protected_endpoint(current_user: User = Depends(get_supervisor_user)):
        return {"user_id": current_user.id}
"""

import os
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import jwt, JWTError

from diagramiq.database import get_db
from diagramiq.models.models import User

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for extracting tokens
security = HTTPBearer(auto_error=False)

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


def verify_jwt(token: str) -> dict:
    """
    Verify a signed JWT and return its claims.

    Raises:
        HTTPException: 500 if no signing secret is configured,
            401 if the token is invalid or expired
    """
    secret = os.getenv("JWT_SECRET")
    if not secret:
        logger.critical("JWT_SECRET is not configured; refusing to authenticate requests")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication configuration error"
        )

    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("JWT verification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or names no known user
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )

    claims = verify_jwt(credentials.credentials)

    user_id = claims.get("id") or claims.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims"
        )

    user = db.query(User).filter(User.id == str(user_id)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return user


def get_supervisor_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    FastAPI dependency to require supervisor privileges.

    Raises:
        HTTPException: 403 if the user is not a supervisor
    """
    if not current_user.is_supervisor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Supervisor privileges required"
        )
    return current_user
