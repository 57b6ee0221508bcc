"""Access Control Gate — pure guard predicates over the resolved session.

Invariants:
    - Guards never mutate state; they only inspect the identity they are given
    - No identity -> UnauthorizedError (401) before any handler runs
    - Identity without the admin role on an admin-only route -> ForbiddenError (403)
"""

from travelcrm.core.domain_types import SessionIdentity
from travelcrm.core.errors import ForbiddenError, UnauthorizedError


def require_authenticated(identity: SessionIdentity | None) -> SessionIdentity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_admin(identity: SessionIdentity | None) -> SessionIdentity:
    identity = require_authenticated(identity)
    if not identity.is_admin:
        raise ForbiddenError()
    return identity
