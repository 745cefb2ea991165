import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str


_DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo", "undefined"}


def _api_key_for(provider: str) -> str:
    if provider == "openai":
        candidates = ("OPENAI_API_KEY",)
    else:
        candidates = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")
    for name in candidates:
        value = (os.getenv(name) or "").strip()
        if value and not _looks_like_placeholder(value):
            return value
    return ""


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(provider=provider, model=model, api_key=_api_key_for(provider))
