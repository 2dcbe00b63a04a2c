from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import get_settings
from app.core.interfaces import IPasswordHasher, ITokenService

settings = get_settings()


class PasswordHasher(IPasswordHasher):
    """Bcrypt password hasher implementation (Single Responsibility)."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


class JWTService(ITokenService):
    """JWT session token service implementation (Single Responsibility)."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_days: int = settings.session_expire_days,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_days = expire_days

    @property
    def max_age_seconds(self) -> int:
        return self._expire_days * 24 * 60 * 60

    def create_session_token(self, user_id: str) -> str:
        expire = datetime.now(timezone.utc) + timedelta(days=self._expire_days)
        to_encode = {"sub": user_id, "exp": expire}
        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
            return payload
        except JWTError:
            return None


# Default instances (can be overridden for testing via Dependency Injection)
password_hasher = PasswordHasher()
jwt_service = JWTService()
