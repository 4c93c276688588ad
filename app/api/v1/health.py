from fastapi import APIRouter

from app.schemas.auth import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()
