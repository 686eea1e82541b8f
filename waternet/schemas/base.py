"""Shared pydantic configuration: camelCase on the wire, snake_case in Python."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from waternet.core.security import NAME_MAX_LEN, NAME_MIN_LEN

# Display names for users and nodes; surrounding whitespace is not part of the name.
Name = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN),
]


class ApiModel(BaseModel):
    """Base for request/response bodies. Accepts both camelCase and snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        allow_inf_nan=False,
    )


class MessageResponse(ApiModel):
    """Plain confirmation body."""

    message: str
