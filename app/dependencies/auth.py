"""
Authentication dependencies for FastAPI route protection.

The access token is read from the ``Authorization: Bearer`` header when
present, otherwise from the HTTP-only auth cookie set at login.
"""


from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.db import get_db_manager
from app.db_handlers import DatabaseManager
from app.schemas import UserRecord
from app.utils.auth import extract_user_id_from_token

security = HTTPBearer(auto_error=False)


def _get_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name)


async def get_current_user_optional(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: DatabaseManager = Depends(get_db_manager),
) -> UserRecord | None:
    """
    Optional dependency to get the current authenticated user.
    Returns None if no valid token is provided instead of raising an exception.
    """
    token = _get_token(request, credentials)
    if not token:
        return None

    user_id = extract_user_id_from_token(token)
    if user_id is None:
        return None

    return await db.find_user_by_id(user_id)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: DatabaseManager = Depends(get_db_manager),
) -> UserRecord:
    """
    Dependency to get the current authenticated user from the JWT token.
    """
    token = _get_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = extract_user_id_from_token(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.find_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
