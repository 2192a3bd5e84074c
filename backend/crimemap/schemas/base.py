"""Shared base for camelCase JSON schemas."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Point(CamelModel):
    """Geographic coordinates (range checks happen in the services)."""

    lat: float
    lng: float
