from typing import NoReturn

from fastapi import HTTPException

from careercompass.services.errors import CareerServiceError


def raise_service_error(exc: CareerServiceError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
