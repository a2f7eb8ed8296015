# /health endpoint
# app/api/endpoints/health.py

import logging

from fastapi import APIRouter, status
from pydantic import BaseModel

logger = logging.getLogger(__name__)
router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "UP"
    message: str = "API is running"


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Perform a Health Check",
    response_description="Returns the health status of the API.",
)
async def health_check():
    """
    Liveness check. Does not touch the database so it stays fast.
    """
    return HealthResponse()
