"""Security helpers for password hashing and token signing."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import jwt
from passlib.context import CryptContext

from .config import get_settings
from .errors import UnauthorizedError


_password_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using Argon2id.

    Argon2 generates a random salt per hash and embeds it in the result.
    """

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        return _password_context.verify(password, hashed)


class TokenIssuer(Protocol):
    """Anything able to turn a claims payload into a signed token."""

    def sign(self, claims: dict[str, Any]) -> str: ...

    def decode(self, token: str) -> dict[str, Any]: ...


class JWTTokenIssuer:
    """Sign and verify short-lived JSON Web Tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ) -> None:
        settings = get_settings()
        self._secret_key = secret_key or settings.secret_key
        self._algorithm = algorithm or settings.jwt_algorithm
        self._expires = timedelta(
            minutes=expire_minutes if expire_minutes is not None else settings.access_token_expire_minutes
        )

    def sign(self, claims: dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + self._expires
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise UnauthorizedError("Invalid or expired token") from exc
