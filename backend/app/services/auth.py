"""Login flow: credential verification and token issuance."""
from __future__ import annotations

import logging

import jwt

from app.core.errors import CredentialProcessingError, UnauthorizedError
from app.core.security import PasswordHasher, TokenIssuer
from app.schemas.auth import LoginResult, LoginUser
from app.services.users import CredentialStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

# Verified against when the email is unknown so both failures cost one argon2 check
_DUMMY_HASH = PasswordHasher.hash("dummy-password-for-unknown-accounts")


class Authenticator:
    """Verify an email/password pair and mint a session token.

    Every rejection (unknown email, wrong password, inactive account) raises
    the same :class:`UnauthorizedError` so callers cannot probe which
    emails are registered.
    """

    def __init__(
        self,
        store: CredentialStore,
        issuer: TokenIssuer,
        hasher: type[PasswordHasher] = PasswordHasher,
    ) -> None:
        self._store = store
        self._issuer = issuer
        self._hasher = hasher

    async def login(self, email: str, password: str) -> LoginResult:
        user = await self._store.find_by_email(email)
        if user is None:
            self._hasher.verify(password, _DUMMY_HASH)
            logger.warning("Login failed for %s", email)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        try:
            valid = self._hasher.verify(password, user.password_hash)
        except ValueError as exc:
            logger.exception("Stored password hash for user #%d could not be verified", user.id)
            raise CredentialProcessingError() from exc

        if not valid or not user.is_active:
            logger.warning("Login failed for %s", email)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        claims = {"sub": str(user.id), "email": user.email}
        try:
            token = self._issuer.sign(claims)
        except jwt.PyJWTError as exc:
            logger.exception("Token signing failed for user #%d", user.id)
            raise CredentialProcessingError() from exc

        logger.info("User #%d logged in", user.id)
        return LoginResult(
            access_token=token,
            user=LoginUser(id=user.id, email=user.email, username=user.username),
        )
