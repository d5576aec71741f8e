# This project was developed with assistance from AI tools.
"""Shared schema components."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MessageResponse(BaseModel):
    """Bare ``{success, message}`` acknowledgement."""

    success: bool = True
    message: str


class CamelModel(BaseModel):
    """Base for payloads exchanged with the web frontend in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
