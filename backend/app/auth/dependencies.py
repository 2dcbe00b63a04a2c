from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings, get_settings
from app.database import get_database
from app.users.repository import UserRepository
from app.core.security import password_hasher, jwt_service
from app.auth.service import AuthService
from app.auth.exceptions import InvalidTokenError

security = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
) -> AuthService:
    """Dependency injection for AuthService (Dependency Inversion Principle)."""
    user_repository = UserRepository(db)
    return AuthService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        jwt_service=jwt_service,
    )


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> str | None:
    """Session token from the session cookie, falling back to a Bearer header."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


async def get_current_user(
    token: Annotated[str | None, Depends(get_session_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict:
    """Dependency to get current authenticated user."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    try:
        return await auth_service.get_current_user(token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_optional_user(
    token: Annotated[str | None, Depends(get_session_token)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> dict | None:
    """Like get_current_user, but returns None instead of rejecting."""
    if not token:
        return None
    try:
        return await auth_service.get_current_user(token)
    except InvalidTokenError:
        return None
