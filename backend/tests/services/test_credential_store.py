"""Credential Store — verifies hashing and indistinguishable login failures.

Invariants:
    - Stored hashes are bcrypt, never the plaintext
    - Unknown user, inactive account and wrong password raise the same error
"""

import pytest

from travelcrm.core.errors import InvalidCredentialsError
from travelcrm.services.credential_store import (
    CredentialStore, hash_password, verify_password,
)

from account_factory import TEST_ROUNDS, create_account


def test_hash_is_bcrypt_and_verifies():
    hashed = hash_password("admin123", rounds=TEST_ROUNDS)
    assert hashed.startswith("$2")
    assert hashed != "admin123"
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)


def test_verify_against_malformed_hash_is_false():
    assert not verify_password("admin123", "not-a-hash")
    assert not verify_password("", "whatever")


def test_hash_rejects_empty_password():
    with pytest.raises(ValueError):
        hash_password("")


async def test_verify_returns_admin_for_valid_credentials(test_db):
    created = await create_account(test_db, "alice", "wonderland", role="admin")
    store = CredentialStore(test_db, rounds=TEST_ROUNDS)

    admin = await store.verify("alice", "wonderland")

    assert admin.id == created.id
    assert admin.role == "admin"
    assert admin.password_hash != "wonderland"


async def test_failure_modes_share_one_message(test_db):
    await create_account(test_db, "alice", "wonderland")
    await create_account(test_db, "bob", "builder1", active=False)
    store = CredentialStore(test_db, rounds=TEST_ROUNDS)

    messages = set()
    for username, password in (
        ("alice", "wrong-password"),
        ("bob", "builder1"),
        ("nobody", "whatever"),
    ):
        with pytest.raises(InvalidCredentialsError) as exc:
            await store.verify(username, password)
        assert exc.value.http_status == 401
        messages.add(exc.value.message)

    assert messages == {"Invalid username or password"}


async def test_record_login_sets_last_login(test_db):
    admin = await create_account(test_db, "alice", "wonderland")
    assert admin.last_login is None

    await CredentialStore(test_db).record_login(admin.id)
    await test_db.refresh(admin)

    assert admin.last_login is not None
