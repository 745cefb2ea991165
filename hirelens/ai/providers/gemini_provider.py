from __future__ import annotations

from google import genai
from google.genai import types

from hirelens.ai.types import JsonSchema


class GeminiProvider:
    def __init__(self, model: str, api_key: str, temperature: float = 0.2):
        self._model = model
        self._temperature = temperature
        self._client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str, schema: JsonSchema) -> str:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
                temperature=self._temperature,
            ),
        )
        return (response.text or "").strip()
