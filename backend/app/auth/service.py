from typing import Any

from app.core.interfaces import IPasswordHasher, ITokenService, IUserRepository
from app.users.model import create_user_document
from app.auth.exceptions import (
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
)


class AuthService:
    """Authentication service (Single Responsibility - handles auth logic only)."""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        jwt_service: ITokenService,
    ) -> None:
        # Dependency Inversion - depends on abstractions
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._jwt_service = jwt_service

    async def signup(
        self,
        email: str,
        password: str,
        name: str | None = None,
    ) -> tuple[dict[str, Any], str]:
        """Create an account and return the user with a fresh session token."""
        existing_user = await self._user_repository.get_by_email(email)
        if existing_user:
            raise UserAlreadyExistsError(email)

        hashed_password = self._password_hasher.hash(password)
        user_document = create_user_document(
            email=email,
            hashed_password=hashed_password,
            name=name,
        )

        user = await self._user_repository.create(user_document)
        token = self._jwt_service.create_session_token(str(user["_id"]))
        return user, token

    async def login(self, email: str, password: str) -> tuple[dict[str, Any], str]:
        """Authenticate user and return it with a session token."""
        user = await self._user_repository.get_by_email(email)
        if not user:
            raise InvalidCredentialsError()

        hashed_password = user.get("hashed_password")
        if not hashed_password or not self._password_hasher.verify(password, hashed_password):
            raise InvalidCredentialsError()

        token = self._jwt_service.create_session_token(str(user["_id"]))
        return user, token

    async def get_current_user(self, session_token: str) -> dict[str, Any]:
        """Get current user from a session token."""
        payload = self._jwt_service.decode_token(session_token)
        if not payload:
            raise InvalidTokenError()

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError("Token has no subject")

        user = await self._user_repository.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User not found")

        return user
