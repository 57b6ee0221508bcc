"""Schema Base — camelCase wire format and partial-update helpers.

Invariants:
    - Partial updates only report fields the caller actually sent (exclude_unset)
    - A required column can be omitted from a partial update but never set to null
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True)] | None

MAX_PASSWORD_BYTES = 72


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class PartialUpdate(CamelModel):
    """Base for PUT bodies: every field optional, only sent fields applied."""

    def to_changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("Field may not be null")
    return value


def check_password_length(value: str | None) -> str | None:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class CreateModel(CamelModel):
    """Base for POST bodies: defaults are validated like submitted values."""
    model_config = ConfigDict(validate_default=True)
