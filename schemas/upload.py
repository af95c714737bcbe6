"""Upload request/response models."""
from typing import List, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, the shape the web client expects."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedFile(CamelModel):
    name: str
    file_id: str


class FailedFile(CamelModel):
    name: str
    error: str


class UploadResponse(CamelModel):
    """Response model for the photo upload endpoint."""
    success: bool = True
    upload_id: str
    folder_link: str
    message: str
    uploaded: List[UploadedFile] = []
    failed: List[FailedFile] = []


class ProgressResponse(CamelModel):
    """Snapshot of one batch's progress."""
    total: int
    completed: int
    failed: int = 0
    folder_link: str | None = None
    status: Literal["uploading", "completed", "failed"]
