"""Admin Account Rules — guards on changes that could lock everyone out.

Invariants:
    - An admin may not deactivate their own account
    - The last active admin may not be deactivated or demoted
    - Pure: callers supply the counts they read from the store
"""

from travelcrm.core.domain_types import Role
from travelcrm.core.errors import AdminDeactivationRefused


def removes_admin_access(target_role: str, target_active: bool, changes: dict) -> bool:
    """True when applying changes takes an active admin out of the admin pool."""
    if not target_active or target_role != Role.ADMIN:
        return False
    if changes.get("active") is False:
        return True
    return "role" in changes and changes["role"] != Role.ADMIN


def check_admin_change(
    actor_id: int,
    target_id: int,
    changes: dict,
    removes_access: bool,
    other_active_admins: int,
) -> None:
    if changes.get("active") is False and actor_id == target_id:
        raise AdminDeactivationRefused("You cannot deactivate your own account")
    if removes_access and other_active_admins == 0:
        raise AdminDeactivationRefused(
            "At least one active admin account must remain",
        )


def invalidates_sessions(current_role: str, current_username: str, changes: dict) -> bool:
    """Deactivation, or a new role or username, must end the admin's live sessions.

    Sessions carry the username and role they were opened with.
    """
    if changes.get("active") is False:
        return True
    if "username" in changes and changes["username"] != current_username:
        return True
    return "role" in changes and changes["role"] != current_role
