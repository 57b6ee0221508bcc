"""Audit Detail Text — human-readable one-liners stored in AuditLog.details.

Invariants:
    - Pure string builders; callers pass the entity as it was when the action happened
    - Deletes describe the pre-delete row (it no longer exists afterwards)
"""

from travelcrm.core.domain_types import AuditAction


def client_full_name(first_name: str, last_name: str) -> str:
    """First and last name joined by a single space — also the search haystack."""
    return f"{first_name} {last_name}"


def describe_client(client, action: AuditAction) -> str:
    return f"Client {client_full_name(client.first_name, client.last_name)} {_past(action)}"


def describe_interaction(interaction, action: AuditAction, client=None) -> str:
    if action == AuditAction.CREATE and client is not None:
        name = client_full_name(client.first_name, client.last_name)
        return f"Interaction created for client {name}"
    return f"Interaction {interaction.title} {_past(action)}"


def describe_admin(admin, action: AuditAction) -> str:
    if action == AuditAction.DELETE:
        return f"Admin {admin.username} deactivated"
    return f"Admin {admin.username} {_past(action)}"


def _past(action: AuditAction) -> str:
    return {
        AuditAction.CREATE: "created",
        AuditAction.UPDATE: "updated",
        AuditAction.DELETE: "deleted",
    }[action]
