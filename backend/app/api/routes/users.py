"""User management endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_credential_store, get_db
from app.schemas.user import DeleteResult, UserCreate, UserRead, UserUpdate
from app.services.users import CredentialStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=list[UserRead])
async def list_users(store: CredentialStore = Depends(get_credential_store)) -> list[UserRead]:
    return await store.list_all()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> UserRead:
    user = await store.create(payload)
    await session.commit()
    return user


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, store: CredentialStore = Depends(get_credential_store)) -> UserRead:
    return await store.get(user_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> UserRead:
    user = await store.update(user_id, payload)
    await session.commit()
    return user


@router.delete("/{user_id}", response_model=DeleteResult)
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    store: CredentialStore = Depends(get_credential_store),
) -> DeleteResult:
    result = await store.remove(user_id)
    await session.commit()
    return result
