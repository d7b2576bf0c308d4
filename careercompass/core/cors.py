from __future__ import annotations

from typing import Any

from careercompass.core.config import Settings, settings


def cors_options(config: Settings = settings) -> dict[str, Any]:
    """Keyword arguments for Starlette's CORSMiddleware."""
    options: dict[str, Any] = {
        "allow_origins": list(config.cors_allowed_origins),
        "allow_credentials": config.cors_allow_credentials,
        "allow_methods": ["GET", "POST", "PATCH", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-API-Key"],
    }
    if config.cors_allow_origin_regex:
        options["allow_origin_regex"] = config.cors_allow_origin_regex
    return options
