from hirelens.ai.config import load_ai_config
from hirelens.ai.errors import ModelCallError
from hirelens.ai.types import JsonSchema, ModelClient

from hirelens.ai.providers.gemini_provider import GeminiProvider
from hirelens.ai.providers.openai_provider import OpenAIProvider


class UnconfiguredProvider:
    def __init__(self, message: str):
        self._message = message

    async def generate(self, prompt: str, schema: JsonSchema) -> str:
        raise ModelCallError(self._message, code="llm_disabled")


def get_ai_client() -> ModelClient:
    cfg = load_ai_config()

    if cfg.provider not in {"gemini", "openai"}:
        raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

    if not cfg.api_key:
        env_name = "OPENAI_API_KEY" if cfg.provider == "openai" else "GEMINI_API_KEY"
        return UnconfiguredProvider(
            f"The model API key is not configured. Set {env_name} in .env and restart the server."
        )

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, api_key=cfg.api_key)

    return GeminiProvider(model=cfg.model, api_key=cfg.api_key)
