"""Photo upload and progress routers."""
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from loguru import logger

from app.dependencies import (
    get_app_settings,
    get_drive_connector_factory,
    get_progress_store,
    get_temp_storage,
)
from schemas.common import ErrorResponse
from schemas.upload import FailedFile, ProgressResponse, UploadedFile, UploadResponse
from services.errors import GatewayError
from services.upload_service import UploadBatch, get_progress, handle_upload_batch
from src.bridge.drive_connector import DriveConnector
from src.config.settings import Settings
from src.progress.store import ProgressStore
from src.storage.temp_storage import TempStorage

router = APIRouter()


@router.post(
    "/upload-photos",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_photos(
    customer_name: str = Form(..., alias="customerName"),
    order_number: str = Form(..., alias="orderNumber"),
    photos: Optional[List[UploadFile]] = File(None),
    settings: Settings = Depends(get_app_settings),
    storage: TempStorage = Depends(get_temp_storage),
    store: ProgressStore = Depends(get_progress_store),
    get_connector: Callable[[], DriveConnector] = Depends(get_drive_connector_factory),
):
    """
    Upload a batch of order photos into a fresh Drive folder.

    Files are staged locally, a folder named after the customer and order is
    created, and every file is sent to it. Poll
    /api/upload-progress/{uploadId} while the request is in flight.
    """
    batch = UploadBatch(
        customer_name=customer_name,
        order_number=order_number,
        files=photos or [],
    )
    try:
        result = await handle_upload_batch(
            batch,
            get_connector=get_connector,
            storage=storage,
            store=store,
            settings=settings,
        )
    except GatewayError:
        raise
    except Exception as e:
        logger.exception("Upload error for order {}", order_number)
        raise GatewayError(str(e)) from e

    return UploadResponse(
        upload_id=result.upload_id,
        folder_link=result.folder_link,
        message=result.message,
        uploaded=[UploadedFile(name=o.name, file_id=o.file_id) for o in result.uploaded],
        failed=[FailedFile(name=o.name, error=o.error) for o in result.failed],
    )


@router.get(
    "/upload-progress/{upload_id}",
    response_model=ProgressResponse,
    responses={404: {"model": ErrorResponse}},
)
async def upload_progress(upload_id: str, store: ProgressStore = Depends(get_progress_store)):
    """Current progress of one upload batch."""
    record = get_progress(store, upload_id)
    return ProgressResponse(
        total=record.total,
        completed=record.completed,
        failed=record.failed,
        folder_link=record.folder_link,
        status=record.status.value,
    )
