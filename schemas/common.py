"""Common Pydantic models."""
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    details: str | None = None


class RootResponse(BaseModel):
    """Liveness message served at the root path."""
    message: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
