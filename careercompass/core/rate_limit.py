from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from careercompass.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None):
    """Limit an AI-backed route; the decorated endpoint must accept `request`."""
    if not settings.rate_limit_enabled:
        return lambda endpoint: endpoint
    return limiter.limit(limit or settings.rate_limit)
