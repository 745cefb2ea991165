from __future__ import annotations

from typing import Any, Protocol

JsonSchema = dict[str, Any]


class ModelClient(Protocol):
    async def generate(self, prompt: str, schema: JsonSchema) -> str: ...
