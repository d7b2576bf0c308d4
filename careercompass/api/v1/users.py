import sqlite3

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from careercompass.api.v1.errors import raise_service_error
from careercompass.core.config import settings
from careercompass.core.rate_limit import rate_limit
from careercompass.core.security import require_api_key
from careercompass.schemas.user import (
    ProfileSubmissionResponse,
    ProfileTextRequest,
    QuickScanRequest,
    User,
    UserCreate,
)
from careercompass.services.errors import CareerServiceError
from careercompass.services.profile_service import submit_profile
from careercompass.services.resume_text import extract_resume_text
from careercompass.storage import db

router = APIRouter()


@router.post("/users", response_model=User)
def create_user(payload: UserCreate, _: None = Depends(require_api_key)):
    existing = db.get_user_by_email(payload.email)
    if existing is not None:
        return existing
    try:
        return db.create_user(payload)
    except sqlite3.IntegrityError:
        # Lost a race with a concurrent create for the same email.
        user = db.get_user_by_email(payload.email)
        if user is None:
            raise
        return user


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: int):
    user = db.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.post("/users/{user_id}/quick-scan", response_model=User)
def quick_scan(user_id: int, payload: QuickScanRequest, _: None = Depends(require_api_key)):
    user = db.update_user_scan(user_id, domain=payload.domain, experience_level=payload.experience_level)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.post("/users/{user_id}/resume", response_model=ProfileSubmissionResponse)
@rate_limit()
async def upload_resume(
    request: Request,
    user_id: int,
    resume: UploadFile = File(...),
    _: None = Depends(require_api_key),
):
    content = await resume.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Resume file is too large.",
        )
    if db.get_user(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    filename = resume.filename or "resume"
    try:
        text = extract_resume_text(filename, content, resume.content_type)
        return await submit_profile(user_id, text, filename=filename)
    except CareerServiceError as exc:
        raise_service_error(exc)


@router.post("/users/{user_id}/profile", response_model=ProfileSubmissionResponse)
@rate_limit()
async def submit_profile_text(
    request: Request,
    user_id: int,
    payload: ProfileTextRequest,
    _: None = Depends(require_api_key),
):
    try:
        return await submit_profile(user_id, payload.text)
    except CareerServiceError as exc:
        raise_service_error(exc)
