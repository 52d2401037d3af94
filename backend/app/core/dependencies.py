"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, UnauthorizedError
from app.core.security import JWTTokenIssuer, TokenIssuer
from app.db.session import get_session
from app.schemas.user import UserRead
from app.services.auth import Authenticator
from app.services.users import CredentialStore

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


def get_token_issuer() -> TokenIssuer:
    return JWTTokenIssuer()


def get_credential_store(session: AsyncSession = Depends(get_db)) -> CredentialStore:
    return CredentialStore(session)


def get_authenticator(
    store: CredentialStore = Depends(get_credential_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Authenticator:
    return Authenticator(store, issuer)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    store: CredentialStore = Depends(get_credential_store),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> UserRead:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    payload = issuer.decode(credentials.credentials)
    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        raise UnauthorizedError("Invalid or expired token")

    try:
        user = await store.get(int(subject))
    except NotFoundError as exc:
        raise UnauthorizedError("Invalid or expired token") from exc
    if not user.is_active:
        raise UnauthorizedError("Invalid or expired token")
    return user
