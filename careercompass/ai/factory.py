from careercompass.ai.config import load_ai_config
from careercompass.ai.fallback import FallbackAdvisor
from careercompass.ai.heuristic import HeuristicAdvisor
from careercompass.ai.providers.openai_provider import OpenAIProvider
from careercompass.ai.remote import RemoteAdvisor
from careercompass.ai.types import CareerAdvisor


def get_advisor() -> CareerAdvisor:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        remote = RemoteAdvisor(OpenAIProvider(model=cfg.model, timeout_s=cfg.timeout_s), config=cfg)
        return FallbackAdvisor(remote, HeuristicAdvisor())

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
