"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_authenticator, get_credential_store, get_current_user, get_db
from app.schemas.auth import LoginRequest, LoginResult
from app.schemas.user import UserCreate, UserRead
from app.services.auth import Authenticator
from app.services.users import CredentialStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> UserRead:
    user = await store.create(payload)
    await session.commit()
    return user


@router.post("/login", response_model=LoginResult)
async def login(
    payload: LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator),
) -> LoginResult:
    return await authenticator.login(payload.email, payload.password)


@router.get("/me", response_model=UserRead)
async def get_current_user_info(current_user: UserRead = Depends(get_current_user)) -> UserRead:
    return current_user
