"""Liveness endpoint; touches neither the database nor the media root."""

from fastapi import APIRouter
from pydantic import BaseModel

from walkin.config import get_settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    token_signature_verified: bool


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.app_env,
        token_signature_verified=settings.token_verify_signature,
    )
