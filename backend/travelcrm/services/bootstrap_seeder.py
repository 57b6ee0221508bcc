"""Bootstrap Seeder — guarantees one administrator exists on first run.

Invariants:
    - Zero admins -> exactly one admin created with role=admin, active=True
    - Any admins -> no-op (idempotent; existence checked first, same startup path)
    - The creation is audited with admin_id=None (system-initiated)

Design Decisions:
    - Credentials come from settings so deployments can override the defaults
    - Single-instance startup assumed: no cross-process seeding lock
"""

import logging

from travelcrm.core.audit_details import describe_admin
from travelcrm.core.domain_types import AuditAction, EntityType, Role
from travelcrm.core.repository_protocols import AdminStore, AuditTrail

logger = logging.getLogger(__name__)


async def seed_default_admin(
    admins: AdminStore,
    audit: AuditTrail,
    username: str,
    password: str,
    full_name: str,
    email: str,
):
    """Create the default admin if the store has none. Returns it, or None."""
    if await admins.count() > 0:
        logger.info("Admins present, skipping bootstrap seed")
        return None

    admin = await admins.create({
        "username": username,
        "password": password,
        "full_name": full_name,
        "email": email,
        "role": Role.ADMIN.value,
        "active": True,
    })
    await audit.record(
        None, EntityType.ADMIN.value, admin.id, AuditAction.CREATE.value,
        describe_admin(admin, AuditAction.CREATE),
    )
    logger.warning(
        f"Default admin account '{username}' created; change its password",
        extra={"admin_id": admin.id},
    )
    return admin
