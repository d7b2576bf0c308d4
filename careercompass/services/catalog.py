from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from careercompass.schemas.opportunity import OpportunityCreate
from careercompass.storage import db

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).resolve().parents[1] / "data" / "opportunities.yaml"


def load_catalog(path: Path = CATALOG_PATH) -> list[OpportunityCreate]:
    """Read and validate the opportunity catalog file."""
    if not path.exists():
        raise RuntimeError(f"Opportunity catalog not found at '{path}'.")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read opportunity catalog '{path}': {exc}") from exc

    try:
        parsed: Any = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in opportunity catalog '{path}': {exc}") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("opportunities"), list):
        raise RuntimeError(
            f"Invalid opportunity catalog '{path}': expected a top-level 'opportunities' list."
        )

    try:
        return [OpportunityCreate.model_validate(item) for item in parsed["opportunities"]]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid opportunity entry in '{path}': {exc}") from exc


def seed_opportunities(path: Path = CATALOG_PATH) -> int:
    """Insert the catalog when the opportunities table is empty. Returns rows inserted."""
    if db.count_opportunities() > 0:
        return 0

    entries = load_catalog(path)
    for entry in entries:
        db.create_opportunity(entry)
    logger.info("opportunity_catalog_seeded count=%s", len(entries))
    return len(entries)
