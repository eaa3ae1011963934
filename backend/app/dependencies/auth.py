"""
Authentication Dependencies

Token verification happens upstream (API gateway / identity provider).
By the time a request reaches these routes, the bearer token is the
verified subject and is used directly as the user token.

Usage:
    @router.get("/me")
    def me(token: str = Depends(get_user_token)):
        ...
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.models import User
from app.services.errors import NotFoundError, StorageError
from app.services.users import get_user

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for extracting tokens
security = HTTPBearer(auto_error=False)


def get_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Extract the user token from the Authorization header.

    Raises:
        HTTPException 401: Missing or empty bearer token
    """
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No bearer token found within Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials.strip()


def get_current_user(
    token: str = Depends(get_user_token),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the bearer token to a registered user.

    Raises:
        HTTPException 404: No user registered for this token
        HTTPException 503: Storage unavailable
    """
    try:
        return get_user(db, token)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except StorageError as e:
        logger.error("User lookup failed: %s", e)
        raise HTTPException(status_code=503, detail="Storage unavailable")
