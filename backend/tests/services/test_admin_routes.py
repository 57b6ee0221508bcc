"""Admin Routes — verifies admin-only access and password-free responses.

Invariants:
    - 401 without a session, 403 for role=user
    - No response ever carries a password or its hash
    - DELETE deactivates and ends the target's sessions
"""

from sqlalchemy import select

from travelcrm.models.audit_log import AuditLog

from account_factory import create_account, login

NEW_ADMIN = {
    "username": "jdoe", "password": "secret123",
    "fullName": "Jane Doe", "email": "jane@example.com", "role": "user",
}


def assert_no_password(payload):
    text = str(payload).lower()
    assert "password" not in text
    assert "$2b$" not in text


async def test_anonymous_is_401(client):
    res = await client.get("/api/admins")
    assert res.status_code == 401


async def test_user_role_is_403(user_client):
    for res in (
        await user_client.get("/api/admins"),
        await user_client.post("/api/admins", json=NEW_ADMIN),
        await user_client.put("/api/admins/1", json={"fullName": "X"}),
    ):
        assert res.status_code == 403
        assert res.json() == {"message": "Forbidden"}


async def test_list_orders_by_full_name_without_passwords(admin_client, test_db):
    await create_account(test_db, "zed", full_name="Aaron Zed")

    res = await admin_client.get("/api/admins")

    assert res.status_code == 200
    names = [a["fullName"] for a in res.json()]
    assert names == ["Aaron Zed", "System Administrator"]
    assert_no_password(res.json())


async def test_create_returns_201_and_is_audited(admin_client, admin_account, test_db):
    res = await admin_client.post("/api/admins", json=NEW_ADMIN)

    assert res.status_code == 201
    body = res.json()
    assert body["username"] == "jdoe"
    assert body["role"] == "user"
    assert body["active"] is True
    assert_no_password(body)

    logs = (await test_db.execute(
        select(AuditLog).where(AuditLog.entity_type == "admin"),
    )).scalars().all()
    assert [(log.entity_id, log.action, log.admin_id) for log in logs] == [
        (body["id"], "create", admin_account.id),
    ]


async def test_created_admin_can_log_in(admin_client, second_client):
    await admin_client.post("/api/admins", json=NEW_ADMIN)
    res = await login(second_client, "jdoe", "secret123")
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "user"


async def test_duplicate_username_is_400(admin_client):
    res = await admin_client.post("/api/admins", json={**NEW_ADMIN, "username": "admin"})
    assert res.status_code == 400
    assert res.json() == {"message": "Username 'admin' is already taken"}


async def test_create_validation_names_field(admin_client):
    res = await admin_client.post("/api/admins", json={**NEW_ADMIN, "email": "nope"})
    assert res.status_code == 400
    assert '"email"' in res.json()["message"]


async def test_get_by_id(admin_client, admin_account):
    res = await admin_client.get(f"/api/admins/{admin_account.id}")
    assert res.status_code == 200
    assert res.json()["username"] == "admin"
    assert_no_password(res.json())


async def test_invalid_and_missing_ids(admin_client):
    res = await admin_client.get("/api/admins/abc")
    assert res.status_code == 400
    assert res.json() == {"message": "Invalid ID"}

    res = await admin_client.put("/api/admins/999", json={"fullName": "Ghost"})
    assert res.status_code == 404
    assert res.json() == {"message": "Admin not found"}


async def test_update_password_is_rehashed(admin_client, user_account, second_client):
    res = await admin_client.put(
        f"/api/admins/{user_account.id}", json={"password": "newpass1"},
    )
    assert res.status_code == 200
    assert_no_password(res.json())

    assert (await login(second_client, "agent", "agent123")).status_code == 401
    assert (await login(second_client, "agent", "newpass1")).status_code == 200


async def test_delete_deactivates_and_ends_sessions(admin_client, user_client, user_account):
    assert (await user_client.get("/api/clients")).status_code == 200

    res = await admin_client.delete(f"/api/admins/{user_account.id}")

    assert res.status_code == 200
    assert res.json() == {"message": "Admin deactivated successfully"}
    assert (await user_client.get("/api/clients")).status_code == 401
    fetched = await admin_client.get(f"/api/admins/{user_account.id}")
    assert fetched.json()["active"] is False


async def test_cannot_deactivate_self(admin_client, admin_account):
    res = await admin_client.delete(f"/api/admins/{admin_account.id}")
    assert res.status_code == 400
    assert res.json() == {"message": "You cannot deactivate your own account"}


async def test_rename_ends_sessions_under_old_username(
    admin_client, user_client, user_account,
):
    res = await admin_client.put(
        f"/api/admins/{user_account.id}", json={"username": "agent2"},
    )
    assert res.status_code == 200
    assert res.json()["username"] == "agent2"

    assert (await user_client.get("/api/auth/user")).status_code == 401
    relogin = await login(user_client, "agent2", "agent123")
    assert relogin.json()["user"]["username"] == "agent2"
    me = await user_client.get("/api/auth/user")
    assert me.json()["user"]["username"] == "agent2"
