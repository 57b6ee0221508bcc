"""Admin Schemas — creation and partial update of administrator accounts.

Invariants:
    - password accepted in plaintext here and hashed by the repository before persistence
    - username: at least 3 characters after stripping
    - password: 6 characters minimum, 72 bytes maximum (bcrypt input limit)
"""

from typing import Annotated

from pydantic import EmailStr, StringConstraints, field_validator

from travelcrm.core.domain_types import Role
from travelcrm.schemas.base import (
    CreateModel, NonBlank, PartialUpdate, check_password_length, reject_null,
)

Username = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100),
]
Password = Annotated[str, StringConstraints(min_length=6)]


class AdminCreate(CreateModel):
    username: Username
    password: Password
    full_name: NonBlank
    email: EmailStr
    role: Role = Role.USER
    active: bool = True

    password_bytes = field_validator("password")(check_password_length)


class AdminUpdate(PartialUpdate):
    username: Username | None = None
    password: Password | None = None
    full_name: NonBlank | None = None
    email: EmailStr | None = None
    role: Role | None = None
    active: bool | None = None

    no_nulls = field_validator(
        "username", "password", "full_name", "email", "role", "active",
    )(reject_null)
    password_bytes = field_validator("password")(check_password_length)
