"""
Shared Pydantic v2 building blocks reused across every schema module.

``ApiModel`` fixes the wire conventions once: camelCase field names on the
wire (snake_case in Python), ORM mode so SQLAlchemy instances can be
serialised directly, and acceptance of either spelling on input.

``UtcDateTime`` is the timestamp type used by all request payloads: it
accepts full ISO timestamps as well as bare ``YYYY-MM-DD`` dates (widened to
midnight) and normalises timezone-aware values to naive UTC, the storage
convention.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from contractflow.utils.dates import coerce_datetime, to_naive_utc

UtcDateTime = Annotated[
    datetime,
    BeforeValidator(coerce_datetime),
    AfterValidator(to_naive_utc),
]


class ApiModel(BaseModel):
    """Base class for every request and response schema."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CreatedResponse(ApiModel):
    """Body of a ``201 Created`` response for JSON create endpoints.

    Attributes:
        id: Identifier assigned to the new record.
    """

    id: uuid.UUID = Field(..., description="Identifier of the created record.")
