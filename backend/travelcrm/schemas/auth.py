from typing import Annotated

from pydantic import StringConstraints

from travelcrm.schemas.base import CamelModel


class LoginRequest(CamelModel):
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    password: Annotated[str, StringConstraints(min_length=6)]
