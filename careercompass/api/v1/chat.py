from fastapi import APIRouter, Depends, HTTPException, Request, status

from careercompass.api.v1.errors import raise_service_error
from careercompass.core.rate_limit import rate_limit
from careercompass.core.security import require_api_key
from careercompass.schemas.chat import ChatRequest, ChatResponse, ChatSession
from careercompass.services.chat_service import advise
from careercompass.services.errors import CareerServiceError
from careercompass.storage import db

router = APIRouter()


@router.post("/users/{user_id}/chat", response_model=ChatResponse)
@rate_limit()
async def chat(
    request: Request,
    user_id: int,
    payload: ChatRequest,
    _: None = Depends(require_api_key),
):
    try:
        return await advise(user_id, payload.messages, session_id=payload.session_id)
    except CareerServiceError as exc:
        raise_service_error(exc)


@router.get("/users/{user_id}/chat-sessions", response_model=list[ChatSession])
def chat_sessions(user_id: int):
    if db.get_user(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return db.list_user_chat_sessions(user_id)
