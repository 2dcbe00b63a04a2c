import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from app.auth.schemas import SignupRequest, LoginRequest, LogoutResponse
from app.auth.service import AuthService
from app.auth.dependencies import get_auth_service, get_optional_user
from app.auth.exceptions import UserAlreadyExistsError, InvalidCredentialsError
from app.config import Settings, get_settings
from app.core.security import jwt_service
from app.users.schemas import SessionResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_session_cookie(
    response: Response, request: Request, token: str, settings: Settings
) -> None:
    """Attach the session cookie; cross-site attributes only over HTTPS."""
    is_secure = (
        request.url.scheme == "https"
        or request.headers.get("x-forwarded-proto") == "https"
        or settings.environment == "production"
    )
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=jwt_service.max_age_seconds,
        httponly=True,
        secure=is_secure,
        samesite="none" if is_secure else "lax",
        path="/",
    )


@router.post("/signup", response_model=SessionResponse)
async def signup(
    request: SignupRequest,
    http_request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Create an account and start a session."""
    try:
        user, token = await auth_service.signup(
            email=request.email,
            password=request.password,
            name=request.name,
        )
    except UserAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already in use",
        )

    _set_session_cookie(response, http_request, token, settings)
    logger.info(f"New account created: {user['email']}")
    return SessionResponse(user=UserResponse.from_document(user))


@router.post("/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Login and start a session."""
    try:
        user, token = await auth_service.login(
            email=request.email,
            password=request.password,
        )
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    _set_session_cookie(response, http_request, token, settings)
    return SessionResponse(user=UserResponse.from_document(user))


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> LogoutResponse:
    """End the current session."""
    response.delete_cookie(settings.session_cookie_name, path="/")
    return LogoutResponse()


@router.get("/session", response_model=SessionResponse)
async def get_session(
    current_user: Annotated[dict | None, Depends(get_optional_user)],
) -> SessionResponse:
    """Current session user, or null when not logged in."""
    if current_user is None:
        return SessionResponse(user=None)
    return SessionResponse(user=UserResponse.from_document(current_user))
