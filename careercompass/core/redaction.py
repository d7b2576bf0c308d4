from __future__ import annotations

import hashlib


def short_hash(value: str | None) -> str:
    """First 12 hex chars of the SHA-256 of the stripped value; "" for blank input."""
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]
