from contextlib import asynccontextmanager
import logging

from careercompass.analytics.db import init_db as init_analytics_db
from careercompass.analytics.db import purge_old_records
from careercompass.services.catalog import seed_opportunities
from careercompass.storage.db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    init_db()
    inserted = seed_opportunities()
    if inserted:
        logger.info("startup_catalog_seeded inserted=%s", inserted)

    init_analytics_db()
    try:
        deleted = purge_old_records()
        if any(deleted.values()):
            logger.info("analytics_retention_purge deleted=%s", deleted)
    except Exception as exc:  # pragma: no cover
        logger.warning("analytics_retention_purge_failed: %s", exc)
    yield
