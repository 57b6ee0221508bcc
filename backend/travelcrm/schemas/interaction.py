"""Interaction Schemas.

Invariants:
    - clientId comes from the URL path, never from the body
    - date defaults to "now" when omitted on create
"""

from datetime import datetime

from pydantic import field_validator

from travelcrm.core.domain_types import InteractionType
from travelcrm.schemas.base import CreateModel, NonBlank, PartialUpdate, reject_null


class InteractionCreate(CreateModel):
    type: InteractionType
    title: NonBlank
    description: str
    date: datetime | None = None


class InteractionUpdate(PartialUpdate):
    type: InteractionType | None = None
    title: NonBlank | None = None
    description: str | None = None
    date: datetime | None = None

    no_nulls = field_validator("type", "title", "description", "date")(reject_null)
