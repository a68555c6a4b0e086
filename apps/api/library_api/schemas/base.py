"""Shared schema base classes and enums."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Visibility(str, Enum):
    PUBLIC = "PUBLIC"
    MEMBERS_ONLY = "MEMBERS_ONLY"
    PRIVATE = "PRIVATE"


class StatusMessage(ApiModel):
    success: bool = True
    message: str


class OkResponse(ApiModel):
    ok: bool = True
