"""Audit Logger — append-only trail of successful mutations.

Invariants:
    - record() only ever INSERTs; there is no update or delete path for AuditLog
    - record() is called after the mutation committed, so a failure here cannot
      undo the mutation ("mutation wins")
    - A failed write is rolled back, logged at ERROR with its coordinates and
      reported as None; the caller's response is unchanged
    - Over HTTP the logger holds its own AsyncSession, so that rollback never
      touches the request session holding the mutated row
    - Read accessors order newest first, ties broken by id

Design Decisions:
    - Best-effort write wrapped in try/except: the audit trail must never turn a
      committed mutation into an error response
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travelcrm.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

DEFAULT_AUDIT_LIMIT = 100


class AuditLogger:
    """Writes and reads AuditLog rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        admin_id: int | None,
        entity_type: str,
        entity_id: int,
        action: str,
        details: str,
    ) -> AuditLog | None:
        entry = AuditLog(
            admin_id=admin_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            details=details,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.db.add(entry)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Audit write failed after committed mutation: {e}",
                extra={
                    "admin_id": admin_id,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "action": action,
                    "error_code": "AUDIT_WRITE_FAILED",
                },
            )
            return None
        return entry

    async def list_all(self, limit: int = DEFAULT_AUDIT_LIMIT) -> list[AuditLog]:
        result = await self.db.execute(
            select(AuditLog)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .limit(limit),
        )
        return list(result.scalars().all())

    async def list_by_entity(
        self, entity_type: str, entity_id: int,
    ) -> list[AuditLog]:
        result = await self.db.execute(
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type)
            .where(AuditLog.entity_id == entity_id)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc()),
        )
        return list(result.scalars().all())
