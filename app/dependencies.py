"""Shared FastAPI dependencies."""
from functools import lru_cache
from typing import Callable

from src.bridge.drive_connector import DriveConnector
from src.config.settings import get_settings
from src.progress.store import ProgressStore
from src.storage.temp_storage import TempStorage


@lru_cache()
def get_app_settings():
    """Return cached settings instance for FastAPI dependency injection."""
    return get_settings()


@lru_cache()
def get_progress_store() -> ProgressStore:
    """Process-wide progress store shared by the upload and progress routes."""
    settings = get_app_settings()
    return ProgressStore(
        ttl_seconds=settings.progress_ttl_seconds,
        max_entries=settings.progress_max_entries,
    )


def get_temp_storage() -> TempStorage:
    settings = get_app_settings()
    return TempStorage(settings.upload_dir, settings.max_file_size_bytes)


@lru_cache()
def _drive_connector() -> DriveConnector:
    return DriveConnector.from_settings(get_app_settings())


def get_drive_connector_factory() -> Callable[[], DriveConnector]:
    """
    Hand out the connector lazily so requests rejected up front never
    need Google credentials.
    """
    return _drive_connector
