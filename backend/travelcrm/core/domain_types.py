"""Domain Types — enums and identity types shared across the CRM.

Invariants:
    - Every closed value set (roles, segments, interaction types, audit actions)
      is an Enum — no raw string matching in domain logic
    - Enum values are exactly the strings stored in the database and sent on the wire
    - SessionIdentity never carries a password hash

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - NewType over wrapper classes: zero runtime cost, full type-checker support
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AdminId = NewType("AdminId", int)
ClientId = NewType("ClientId", int)
InteractionId = NewType("InteractionId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Flat admin/user split — no role hierarchy beyond this."""
    ADMIN = "admin"
    USER = "user"


class MarketType(str, Enum):
    LOCAL = "local"
    OVERSEA = "oversea"


class Segment(str, Enum):
    FIT = "FIT"
    SERIES = "Series"
    GROUP = "Group"
    OTA = "OTA"
    WELLNESS = "Wellness"


class BusinessType(str, Enum):
    TOUR_OPERATOR = "Tour Operator"
    TRAVEL_AGENT = "Travel Agent"


class InteractionType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    OTHER = "other"


class EntityType(str, Enum):
    """Entities that produce audit rows."""
    CLIENT = "client"
    INTERACTION = "interaction"
    ADMIN = "admin"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class SessionState(str, Enum):
    """Per-token authentication state: Anonymous -> Authenticated -> Revoked."""
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    REVOKED = "revoked"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionIdentity:
    """Identity restored from a session record — the only identity handlers see."""
    id: AdminId
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
