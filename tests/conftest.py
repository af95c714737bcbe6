from __future__ import annotations

import io
import threading
import time
from pathlib import Path
from typing import List, Set

import pytest
import requests

from src.bridge.drive_connector import RemoteFile, RemoteFolder
from src.config.settings import Settings


class FakeDrive:
    """In-memory stand-in for DriveConnector that records every call."""

    def __init__(
        self,
        fail_names: Set[str] | None = None,
        fail_folder: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.fail_names = fail_names or set()
        self.fail_folder = fail_folder
        self.delay = delay
        self.in_flight = 0
        self.peak_in_flight = 0
        self.folders: List[str] = []
        self.shared: List[str] = []
        self.uploads: List[tuple] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.folders) + len(self.shared) + len(self.uploads)

    def create_folder(self, name: str) -> RemoteFolder:
        if self.fail_folder:
            raise requests.HTTPError("403 Forbidden")
        with self._lock:
            self.folders.append(name)
            folder_id = f"folder-{len(self.folders)}"
        return RemoteFolder(id=folder_id, name=name, link=f"https://drive.test/{folder_id}")

    def grant_public_read(self, folder_id: str) -> None:
        self.shared.append(folder_id)

    def upload_file(self, path: Path, name: str, mime_type: str, folder_id: str) -> RemoteFile:
        assert path.exists()
        with self._lock:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
        finally:
            with self._lock:
                self.in_flight -= 1
        if name in self.fail_names:
            raise requests.HTTPError(f"500 Server Error for {name}")
        with self._lock:
            self.uploads.append((name, mime_type, folder_id, path.read_bytes()))
            return RemoteFile(id=f"file-{len(self.uploads)}", name=name)


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir: Path) -> Settings:
    return Settings(
        upload_dir=str(upload_dir),
        max_file_size_bytes=1024,
        max_files_per_batch=10,
        upload_concurrency=2,
        drive_public_folders=True,
    )


@pytest.fixture
def fake_drive() -> FakeDrive:
    return FakeDrive()


@pytest.fixture
def drive_factory():
    return FakeDrive


class StubUpload:
    """Async file-like object shaped like FastAPI's UploadFile."""

    def __init__(self, filename, data, content_type="image/jpeg"):
        self.filename = filename
        self.content_type = content_type
        self._buf = io.BytesIO(data)

    async def read(self, size=-1):
        return self._buf.read(size)


@pytest.fixture
def upload_factory():
    return StubUpload
