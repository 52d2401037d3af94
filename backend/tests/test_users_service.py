"""Tests for the credential store against a real SQLite database."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.errors import ConflictError, NotFoundError
from app.core.security import PasswordHasher
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services.users import CredentialStore, to_public


async def test_create_returns_view_without_hash(session, alice):
    store = CredentialStore(session)

    user = await store.create(alice)

    assert user.id is not None
    assert user.username == "Alice"
    assert user.email == "alice@example.com"
    assert user.is_active is True
    assert user.created_at is not None
    assert "password_hash" not in user.model_dump()
    assert "password" not in user.model_dump()


async def test_create_stores_verifiable_hash(session, alice):
    store = CredentialStore(session)
    await store.create(alice)

    record = await store.find_by_email("alice@example.com")

    assert record is not None
    assert record.password_hash != "Secret123!"
    assert PasswordHasher.verify("Secret123!", record.password_hash)


async def test_duplicate_email_conflicts_without_write(session, alice):
    store = CredentialStore(session)
    await store.create(alice)
    original = await store.find_by_email(alice.email)
    original_hash = original.password_hash

    duplicate = UserCreate(username="Impostor", email="ALICE@example.com", password="Other1234!")
    with pytest.raises(ConflictError):
        await store.create(duplicate)

    record = await store.find_by_email("alice@example.com")
    assert record.username == "Alice"
    assert record.password_hash == original_hash
    assert len(await store.list_all()) == 1


async def test_unique_index_rejects_duplicate_insert(session, alice):
    store = CredentialStore(session)
    await store.create(alice)
    await session.commit()

    # Bypass the application check to simulate a concurrent registration
    async def not_found(_email):
        return None

    store.find_by_email = not_found
    with pytest.raises(ConflictError):
        await store.create(alice)

    result = await session.execute(select(User))
    assert len(result.scalars().all()) == 1


async def test_email_lookup_is_case_insensitive(session, alice):
    store = CredentialStore(session)
    await store.create(alice)

    assert await store.find_by_email("  Alice@Example.COM ") is not None
    assert await store.find_by_email("nobody@example.com") is None


async def test_get_and_list(session, alice):
    store = CredentialStore(session)
    created = await store.create(alice)
    second = await store.create(UserCreate(username="Bob", email="bob@example.com", password="Hunter222!"))

    fetched = await store.get(created.id)
    listed = await store.list_all()

    assert fetched == created
    assert [user.id for user in listed] == [created.id, second.id]
    assert all("password_hash" not in user.model_dump() for user in listed)


async def test_get_missing_user(session):
    store = CredentialStore(session)
    with pytest.raises(NotFoundError, match="User #99 not found"):
        await store.get(99)


async def test_update_merges_and_rehashes(session, alice):
    store = CredentialStore(session)
    created = await store.create(alice)
    old_hash = (await store.find_by_email(alice.email)).password_hash

    updated = await store.update(created.id, UserUpdate(username="Alice B", password="NewSecret456!"))

    assert updated.id == created.id
    assert updated.username == "Alice B"
    assert updated.email == "alice@example.com"
    assert "password_hash" not in updated.model_dump()
    assert updated.updated_at >= created.updated_at

    record = await store.find_by_email(alice.email)
    assert record.password_hash != old_hash
    assert PasswordHasher.verify("NewSecret456!", record.password_hash)
    assert not PasswordHasher.verify("Secret123!", record.password_hash)


async def test_update_leaves_unset_fields(session, alice):
    store = CredentialStore(session)
    created = await store.create(alice)

    updated = await store.update(created.id, UserUpdate(is_active=False))

    assert updated.is_active is False
    assert updated.username == "Alice"


async def test_update_email_to_taken_address_conflicts(session, alice):
    store = CredentialStore(session)
    await store.create(alice)
    bob = await store.create(UserCreate(username="Bob", email="bob@example.com", password="Hunter222!"))

    with pytest.raises(ConflictError):
        await store.update(bob.id, UserUpdate(email="Alice@example.com"))


async def test_update_missing_user(session):
    store = CredentialStore(session)
    with pytest.raises(NotFoundError):
        await store.update(42, UserUpdate(username="ghost"))


async def test_remove_twice(session, alice):
    store = CredentialStore(session)
    created = await store.create(alice)

    result = await store.remove(created.id)
    assert result.id == created.id
    assert result.message == f"User #{created.id} deleted successfully"

    with pytest.raises(NotFoundError):
        await store.remove(created.id)
    assert await store.find_by_email(alice.email) is None


async def test_to_public_drops_hash(session, alice):
    store = CredentialStore(session)
    await store.create(alice)
    record = await store.find_by_email(alice.email)

    view = to_public(record)

    assert set(view.model_dump()) == {"id", "username", "email", "is_active", "created_at", "updated_at"}


async def test_empty_update_changes_nothing(session, alice):
    store = CredentialStore(session)
    created = await store.create(alice)

    unchanged = await store.update(created.id, UserUpdate())

    assert unchanged == created


def test_update_rejects_explicit_null():
    with pytest.raises(ValueError, match="must not be null"):
        UserUpdate(username=None)
    with pytest.raises(ValueError, match="must not be null"):
        UserUpdate.model_validate({"is_active": None})


async def test_other_integrity_errors_are_not_conflicts(session):
    store = CredentialStore(session)
    session.add(User(username=None, email="nameless@example.com", password_hash="x"))

    with pytest.raises(IntegrityError):
        await store._flush_unique()

    assert await store.find_by_email("nameless@example.com") is None
