import os
from dataclasses import dataclass


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    timeout_s: float


def load_ai_config() -> AIConfig:
    enabled = (os.getenv("AI_ENABLED") or "true").strip().lower() in {"1", "true", "yes", "y", "on"}
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()
    try:
        timeout_s = float(os.getenv("AI_TIMEOUT_S", "30"))
    except ValueError:
        timeout_s = 30.0
    return AIConfig(enabled=enabled, provider=provider, model=model, timeout_s=timeout_s)


def openai_api_key() -> str | None:
    key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not key or _looks_like_placeholder(key):
        return None
    return key
