"""Client Schemas — full create body and partial update body.

Invariants:
    - firstName, lastName, email, phone required on create; never nullable on update
    - Optional enum/email fields accept "" from forms and store it as null
"""

from pydantic import EmailStr, field_validator

from travelcrm.core.domain_types import BusinessType, MarketType, Segment
from travelcrm.schemas.base import (
    CreateModel, NonBlank, OptionalText, PartialUpdate, blank_to_none, reject_null,
)

_OPTIONAL_FIELDS = (
    "market", "segment", "business_type",
    "headcount_name", "headcount_role", "headcount_email",
)


class ClientCreate(CreateModel):
    first_name: NonBlank
    last_name: NonBlank
    email: EmailStr
    phone: NonBlank
    market_type: MarketType = MarketType.LOCAL
    market: OptionalText = None
    segment: Segment | None = None
    business_type: BusinessType | None = None
    headcount_name: OptionalText = None
    headcount_role: OptionalText = None
    headcount_email: EmailStr | None = None
    active: bool = True

    blank_optional = field_validator(*_OPTIONAL_FIELDS, mode="before")(blank_to_none)


class ClientUpdate(PartialUpdate):
    first_name: NonBlank | None = None
    last_name: NonBlank | None = None
    email: EmailStr | None = None
    phone: NonBlank | None = None
    market_type: MarketType | None = None
    market: OptionalText = None
    segment: Segment | None = None
    business_type: BusinessType | None = None
    headcount_name: OptionalText = None
    headcount_role: OptionalText = None
    headcount_email: EmailStr | None = None
    active: bool | None = None

    blank_optional = field_validator(*_OPTIONAL_FIELDS, mode="before")(blank_to_none)
    no_nulls = field_validator(
        "first_name", "last_name", "email", "phone", "market_type", "active",
    )(reject_null)
