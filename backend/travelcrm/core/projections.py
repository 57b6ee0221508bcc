"""Public View Projections — the only way entities leave the process.

Invariants:
    - Each projection lists its output fields explicitly (allow-list, not strip-list)
    - public_admin never emits password_hash; no projection exists that does
    - Output keys are the camelCase wire names; datetimes are ISO-8601 UTC

Design Decisions:
    - Allow-list over destructuring: a column added to the ORM model stays private
      until someone adds it here deliberately
    - Duck-typed arguments: works on ORM rows and on test doubles alike
"""

from datetime import datetime

from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.session_lifecycle import as_utc


def _iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


def public_identity(identity: SessionIdentity) -> dict:
    return {
        "id": identity.id,
        "username": identity.username,
        "role": identity.role.value,
    }


def public_admin(admin) -> dict:
    return {
        "id": admin.id,
        "username": admin.username,
        "fullName": admin.full_name,
        "email": admin.email,
        "role": admin.role,
        "active": admin.active,
        "lastLogin": _iso(admin.last_login),
        "createdAt": _iso(admin.created_at),
    }


def public_client(client) -> dict:
    return {
        "id": client.id,
        "firstName": client.first_name,
        "lastName": client.last_name,
        "email": client.email,
        "phone": client.phone,
        "marketType": client.market_type,
        "market": client.market,
        "segment": client.segment,
        "businessType": client.business_type,
        "headcountName": client.headcount_name,
        "headcountRole": client.headcount_role,
        "headcountEmail": client.headcount_email,
        "active": client.active,
        "createdAt": _iso(client.created_at),
        "updatedAt": _iso(client.updated_at),
        "createdBy": client.created_by,
    }


def public_interaction(interaction) -> dict:
    return {
        "id": interaction.id,
        "clientId": interaction.client_id,
        "type": interaction.type,
        "title": interaction.title,
        "description": interaction.description,
        "date": _iso(interaction.date),
        "createdAt": _iso(interaction.created_at),
        "updatedAt": _iso(interaction.updated_at),
        "createdBy": interaction.created_by,
    }


def public_audit_log(log) -> dict:
    return {
        "id": log.id,
        "adminId": log.admin_id,
        "entityType": log.entity_type,
        "entityId": log.entity_id,
        "action": log.action,
        "details": log.details,
        "createdAt": _iso(log.created_at),
    }
