"""FastAPI application setup."""
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.dependencies import get_app_settings
from routers import health, upload
from services.errors import ClientError, EmptyBatchError, GatewayError

app = FastAPI(
    title="Photo Upload Gateway",
    description="Accepts order photos and files them into per-order Google Drive folders",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if isinstance(exc, ClientError):
        logger.info("Rejected {} {}: {}", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    logger.error("Request {} {} failed: {}", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "Upload failed", "details": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Browsers send an empty, nameless "photos" part when no file was picked
    if any(tuple(err.get("loc", ()))[:2] == ("body", "photos") for err in exc.errors()):
        return await gateway_error_handler(request, EmptyBatchError())
    return await request_validation_exception_handler(request, exc)


# Include routers
app.include_router(upload.router, prefix="/api", tags=["Upload"])
app.include_router(health.router, tags=["Health"])
