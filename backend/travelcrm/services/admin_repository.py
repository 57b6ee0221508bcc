"""Admin Repository — administrator accounts.

Invariants:
    - username unique: checked before write, and IntegrityError on commit is
      reported as the same UsernameTakenError (concurrent creators)
    - Any password in create/update input is bcrypt-hashed before it reaches the row
    - Admins are never hard-deleted; deactivation is update(active=False)
    - Deactivation or a new role or username revokes the admin's sessions in the same commit
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.core.admin_rules import invalidates_sessions
from travelcrm.core.domain_types import Role
from travelcrm.core.errors import ResourceNotFoundError, UsernameTakenError
from travelcrm.models.admin import Admin
from travelcrm.services.credential_store import CredentialStore
from travelcrm.services.session_authenticator import SessionAuthenticator

logger = logging.getLogger(__name__)


class AdminRepository:
    """Persistence for Admin rows."""

    def __init__(
        self,
        db: AsyncSession,
        credentials: CredentialStore,
        sessions: SessionAuthenticator,
    ):
        self.db = db
        self.credentials = credentials
        self.sessions = sessions

    async def get(self, admin_id: int) -> Admin:
        result = await self.db.execute(
            select(Admin)
            .where(Admin.id == admin_id)
            .execution_options(populate_existing=True),
        )
        admin = result.scalar_one_or_none()
        if admin is None:
            raise ResourceNotFoundError("Admin", admin_id)
        return admin

    async def get_by_username(self, username: str) -> Admin | None:
        result = await self.db.execute(
            select(Admin).where(Admin.username == username),
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Admin]:
        result = await self.db.execute(
            select(Admin).order_by(Admin.full_name, Admin.id),
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(Admin)) or 0

    async def count_active_admins(self, exclude_id: int | None = None) -> int:
        query = (
            select(func.count())
            .select_from(Admin)
            .where(Admin.role == Role.ADMIN.value)
            .where(Admin.active.is_(True))
        )
        if exclude_id is not None:
            query = query.where(Admin.id != exclude_id)
        return await self.db.scalar(query) or 0

    async def create(self, data: dict) -> Admin:
        fields = dict(data)
        username = fields["username"]
        if await self.get_by_username(username) is not None:
            raise UsernameTakenError(username)

        fields["password_hash"] = await self.credentials.hash(fields.pop("password"))
        admin = Admin(**fields)
        self.db.add(admin)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UsernameTakenError(username)
        await self.db.refresh(admin)
        return admin

    async def update(self, admin_id: int, changes: dict) -> Admin:
        current = await self.get(admin_id)
        fields = dict(changes)

        username = fields.get("username")
        if username is not None and username != current.username:
            if await self.get_by_username(username) is not None:
                raise UsernameTakenError(username)

        if "password" in fields:
            fields["password_hash"] = await self.credentials.hash(fields.pop("password"))

        if fields:
            await self.db.execute(
                update(Admin)
                .where(Admin.id == admin_id)
                .values(**fields)
                .execution_options(synchronize_session=False),
            )
        if invalidates_sessions(current.role, current.username, fields):
            await self.sessions.revoke_all_for_admin(admin_id, commit=False)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UsernameTakenError(username or current.username)
        return await self.get(admin_id)
