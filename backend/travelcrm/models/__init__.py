"""ORM Models — SQLAlchemy declarative models for all CRM entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Relations are plain foreign-key columns; no relationship() graphs.
      Related rows are fetched by explicit repository queries

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from travelcrm.models.admin import Admin  # noqa: F401
from travelcrm.models.client import Client  # noqa: F401
from travelcrm.models.interaction import Interaction  # noqa: F401
from travelcrm.models.audit_log import AuditLog  # noqa: F401
from travelcrm.models.auth_session import AuthSession  # noqa: F401
