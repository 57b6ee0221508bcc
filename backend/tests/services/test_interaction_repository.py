"""Interaction Repository — verifies client linkage, ordering and updates."""

from datetime import datetime, timedelta, timezone

import pytest

from travelcrm.core.errors import ResourceNotFoundError
from travelcrm.services.client_repository import ClientRepository
from travelcrm.services.interaction_repository import InteractionRepository

BASE = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
async def seed_client(test_db):
    return await ClientRepository(test_db).create({
        "first_name": "John", "last_name": "Smith",
        "email": "jsmith@x.com", "phone": "555-0100",
    }, created_by=None)


async def test_create_for_missing_client_is_not_found(test_db):
    with pytest.raises(ResourceNotFoundError) as exc:
        await InteractionRepository(test_db).create(
            404, {"type": "call", "title": "Intro", "description": ""},
            created_by=None,
        )
    assert exc.value.message == "Client not found"


async def test_create_defaults_date_to_now(test_db, seed_client):
    before = datetime.now(timezone.utc) - timedelta(seconds=1)
    interaction = await InteractionRepository(test_db).create(
        seed_client.id,
        {"type": "email", "title": "Brochure", "description": "", "date": None},
        created_by=None,
    )
    assert interaction.date is not None
    assert interaction.date.replace(tzinfo=timezone.utc) >= before


async def test_list_by_client_newest_date_first(test_db, seed_client):
    repo = InteractionRepository(test_db)
    old = await repo.create(
        seed_client.id,
        {"type": "call", "title": "Old", "description": "", "date": BASE},
        created_by=None,
    )
    new = await repo.create(
        seed_client.id,
        {"type": "call", "title": "New", "description": "",
         "date": BASE + timedelta(days=3)},
        created_by=None,
    )

    rows = await repo.list_by_client(seed_client.id)

    assert [i.id for i in rows] == [new.id, old.id]


async def test_update_and_delete(test_db, seed_client):
    repo = InteractionRepository(test_db)
    created = await repo.create(
        seed_client.id, {"type": "call", "title": "Intro", "description": "x"},
        created_by=None,
    )

    updated = await repo.update(created.id, {"title": "Intro call"})
    assert updated.title == "Intro call"
    assert updated.description == "x"
    assert updated.client_id == seed_client.id

    assert await repo.delete(created.id) is True
    assert await repo.delete(created.id) is False
    with pytest.raises(ResourceNotFoundError):
        await repo.get(created.id)


async def test_update_missing_is_not_found(test_db):
    with pytest.raises(ResourceNotFoundError) as exc:
        await InteractionRepository(test_db).update(404, {"title": "x"})
    assert exc.value.message == "Interaction not found"
