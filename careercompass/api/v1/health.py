from fastapi import APIRouter

from careercompass.storage import db

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness plus the size of the active catalog.")
def health_check():
    return {"status": "healthy", "opportunities": len(db.list_opportunities(active_only=True))}
