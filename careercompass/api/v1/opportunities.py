from fastapi import APIRouter, HTTPException, status

from careercompass.schemas.opportunity import Opportunity
from careercompass.storage import db

router = APIRouter()


@router.get("/opportunities", response_model=list[Opportunity])
def list_opportunities():
    return db.list_opportunities(active_only=True)


@router.get("/opportunities/{opportunity_id}", response_model=Opportunity)
def get_opportunity(opportunity_id: int):
    opportunity = db.get_opportunity(opportunity_id)
    if opportunity is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opportunity not found.")
    return opportunity
