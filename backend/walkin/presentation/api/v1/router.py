"""Versioned API router mounted at /api/v1."""

from fastapi import APIRouter

from walkin.presentation.api.v1.endpoints.health import router as health_router
from walkin.presentation.api.v1.endpoints.records import router as records_router

router = APIRouter(prefix="/api/v1")
router.include_router(health_router)
router.include_router(records_router)
