import logging
from fastapi import APIRouter

from api.schemas import HealthResponse
from core.database import database

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/")
async def read_root():
    return {"message": "CareConnect API is running"}


@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    connected = await database.ping()
    return HealthResponse(
        status="OK",
        message="CareConnect API is running",
        database="Connected" if connected else "Disconnected",
    )
