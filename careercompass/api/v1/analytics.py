from fastapi import APIRouter, Depends, Query

from careercompass.analytics import db as analytics_db
from careercompass.core.security import require_api_key

router = APIRouter(prefix="/analytics", dependencies=[Depends(require_api_key)])


@router.get("/summary")
def summary():
    return analytics_db.get_summary()


@router.get("/latest")
def latest(
    limit: int = Query(default=20, ge=1, le=200),
    operation: str | None = Query(default=None, pattern="^(extract_profile|score_match|respond)$"),
):
    return analytics_db.get_latest(limit=limit, operation=operation)
