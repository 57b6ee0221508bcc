"""Store Error Classification — maps raw driver failures onto the CRM taxonomy.

Invariants:
    - Pure: inspects exception text only, never touches the session
    - Recognised stale-schema failures -> SchemaMismatchError (400, actionable)
    - Everything else -> DatabaseError (500) carrying the underlying text

Design Decisions:
    - Text matching over driver exception classes: asyncpg and sqlite report
      missing columns through different exception types but stable wording
"""

import re

from travelcrm.core.errors import CrmError, DatabaseError, SchemaMismatchError

_STALE_SCHEMA_PATTERNS = (
    re.compile(r'column "[^"]+" of relation "[^"]+" does not exist', re.IGNORECASE),
    re.compile(r'column "[^"]+" does not exist', re.IGNORECASE),
    re.compile(r"UndefinedColumn", re.IGNORECASE),
    re.compile(r"no such column", re.IGNORECASE),
    re.compile(r"has no column named", re.IGNORECASE),
)


def is_stale_schema_error(text: str) -> bool:
    return any(p.search(text) for p in _STALE_SCHEMA_PATTERNS)


def underlying_text(exc: BaseException) -> str:
    """Driver message without SQLAlchemy's statement/parameter dump."""
    orig = getattr(exc, "orig", None)
    text = str(orig) if orig is not None else str(exc)
    return text.splitlines()[0] if text else type(exc).__name__


def classify_store_error(exc: BaseException, operation: str) -> CrmError:
    text = underlying_text(exc)
    if is_stale_schema_error(str(exc)):
        return SchemaMismatchError()
    return DatabaseError(text, operation)
