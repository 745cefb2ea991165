from __future__ import annotations

import json
import os
from typing import Optional

from openai import AsyncOpenAI

from hirelens.ai.types import JsonSchema


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        # Retries are owned by the request throttle, not the SDK.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=0,
        )

    async def generate(self, prompt: str, schema: JsonSchema) -> str:
        system_prompt = (
            "Respond with a single JSON object only. It must conform to this schema "
            "(OpenAPI-style types):\n" + json.dumps(schema, ensure_ascii=False)
        )
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else ""
        return (content or "").strip()
