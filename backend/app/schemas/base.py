"""Base schema utilities."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire; both spellings
    are accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreatedAtMixin(BaseModel):
    """Mixin for server-assigned creation timestamp."""

    created_at: datetime


class IDMixin(BaseModel):
    """Mixin for integer id field."""

    id: int


class MessageResponse(BaseSchema):
    """Plain acknowledgement."""

    message: str
