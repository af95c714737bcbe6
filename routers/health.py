"""Liveness routers."""
from fastapi import APIRouter
from schemas.common import HealthResponse, RootResponse

router = APIRouter()


@router.get("/", response_model=RootResponse)
async def root():
    return {"message": "Photo Upload Server is running!"}


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "photo-upload-gateway"}
