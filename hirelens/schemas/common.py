from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

WorkLocationType = Literal["remote", "hybrid", "onsite", "unspecified"]
WorkType = Literal["remote", "hybrid", "onsite"]
Priority = Literal["high", "medium", "low"]

MAX_TEXT_CHARS = 50000


class CamelModel(BaseModel):
    """Base for payloads exchanged with the browser and the model (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
