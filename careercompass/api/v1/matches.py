from fastapi import APIRouter, Depends, HTTPException, Request, status

from careercompass.api.v1.errors import raise_service_error
from careercompass.core.rate_limit import rate_limit
from careercompass.core.security import require_api_key
from careercompass.schemas.match import (
    Match,
    MatchGenerationResponse,
    MatchStatusUpdate,
    MatchWithOpportunity,
)
from careercompass.services.errors import CareerServiceError
from careercompass.services.match_service import generate_matches
from careercompass.storage import db

router = APIRouter()


@router.get("/users/{user_id}/matches", response_model=list[MatchWithOpportunity])
def list_matches(user_id: int):
    if db.get_user(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return db.list_user_matches(user_id)


@router.post("/users/{user_id}/matches/generate", response_model=MatchGenerationResponse)
@rate_limit()
async def regenerate_matches(request: Request, user_id: int, _: None = Depends(require_api_key)):
    try:
        return await generate_matches(user_id)
    except CareerServiceError as exc:
        raise_service_error(exc)


@router.patch("/matches/{match_id}", response_model=Match)
def update_match(match_id: int, payload: MatchStatusUpdate, _: None = Depends(require_api_key)):
    match = db.update_match_status(match_id, payload.status)
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found.")
    return match
