"""Credential store: persistence of user records with password hashing."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.core.security import PasswordHasher
from app.models.user import User
from app.schemas.user import DeleteResult, UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email is already registered"


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively and stored lower case."""

    return email.strip().lower()


def _is_email_conflict(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: users.email"
    # postgres: duplicate key value violates unique constraint "ix_users_email"
    message = str(exc.orig).lower()
    return ("unique" in message or "duplicate" in message) and "email" in message


def to_public(user: User) -> UserRead:
    """Project a user row onto its public view, dropping the password hash."""

    return UserRead.model_validate(user)


class CredentialStore:
    """Owns user rows. Hashes are written here and never leave except via
    :meth:`find_by_email`, which only the authenticator may call.
    """

    def __init__(self, session: AsyncSession, hasher: type[PasswordHasher] = PasswordHasher) -> None:
        self._session = session
        self._hasher = hasher

    async def find_by_email(self, email: str) -> User | None:
        result = await self._session.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def get(self, user_id: int) -> UserRead:
        return to_public(await self._load(user_id))

    async def list_all(self) -> list[UserRead]:
        result = await self._session.execute(select(User).order_by(User.id))
        return [to_public(user) for user in result.scalars().all()]

    async def create(self, data: UserCreate) -> UserRead:
        email = normalize_email(data.email)
        if await self.find_by_email(email) is not None:
            logger.warning("Registration rejected, email already in use: %s", email)
            raise ConflictError(EMAIL_TAKEN)

        user = User(
            username=data.username,
            email=email,
            password_hash=self._hasher.hash(data.password),
            is_active=True,
        )
        self._session.add(user)
        await self._flush_unique()
        await self._session.refresh(user)
        logger.info("Created user #%d (%s)", user.id, user.email)
        return to_public(user)

    async def update(self, user_id: int, data: UserUpdate) -> UserRead:
        user = await self._load(user_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return to_public(user)

        password = changes.pop("password", None)
        if password is not None:
            user.password_hash = self._hasher.hash(password)

        if "email" in changes:
            email = normalize_email(changes.pop("email"))
            if email != user.email:
                existing = await self.find_by_email(email)
                if existing is not None and existing.id != user.id:
                    raise ConflictError(EMAIL_TAKEN)
                user.email = email

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = datetime.now(timezone.utc)

        await self._flush_unique()
        await self._session.refresh(user)
        logger.info("Updated user #%d", user.id)
        return to_public(user)

    async def remove(self, user_id: int) -> DeleteResult:
        user = await self._load(user_id)
        await self._session.delete(user)
        await self._session.flush()
        logger.info("Deleted user #%d", user_id)
        return DeleteResult(id=user_id, message=f"User #{user_id} deleted successfully")

    async def _load(self, user_id: int) -> User:
        user = await self._session.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User #{user_id} not found")
        return user

    async def _flush_unique(self) -> None:
        # The unique index on users.email is the final word on uniqueness
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            if not _is_email_conflict(exc):
                raise
            logger.warning("Unique constraint rejected write: %s", exc.orig)
            raise ConflictError(EMAIL_TAKEN) from exc
