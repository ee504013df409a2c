"""Shared pydantic bases for camelCase wire models."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase JSON; snake_case in Python.

    Float fields reject NaN and infinity.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        allow_inf_nan = False


class StrictCamelModel(CamelModel):
    """CamelModel that rejects unknown fields."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        allow_inf_nan = False
        extra = "forbid"
