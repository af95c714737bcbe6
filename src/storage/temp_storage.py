from __future__ import annotations

import re
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Protocol

from loguru import logger

from services.errors import FileTooLargeError

CHUNK_SIZE = 1024 * 1024
SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._ -]")


class IncomingFile(Protocol):
    """The subset of FastAPI's UploadFile that storage relies on."""

    filename: str | None
    content_type: str | None

    async def read(self, size: int = -1) -> bytes: ...


@dataclass(frozen=True)
class FileBlob:
    original_name: str
    mime_type: str
    local_path: Path
    size_bytes: int


def local_name_for(original_name: str) -> str:
    """Build a unique on-disk name that still shows the original file name."""
    safe = SAFE_NAME_RE.sub("_", Path(original_name).name) or "upload"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe}"


class TempStorage:
    """
    Local staging area for uploaded photos.

    Files live here only between the HTTP request and the Drive upload;
    `consume` and `discard` remove them again.
    """

    def __init__(self, directory: str | Path, max_file_size: int) -> None:
        self.directory = Path(directory)
        self.max_file_size = max_file_size

    def ensure_directory(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    async def store(self, upload: IncomingFile) -> FileBlob:
        """Stream one upload to disk, rejecting it once it passes the size limit."""
        original_name = upload.filename or "upload"
        path = self.ensure_directory() / local_name_for(original_name)
        size = 0
        try:
            with open(path, "wb") as fh:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise FileTooLargeError(original_name, self.max_file_size)
                    fh.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise
        logger.debug("Stored {} ({} bytes) at {}", original_name, size, path)
        return FileBlob(
            original_name=original_name,
            mime_type=upload.content_type or "application/octet-stream",
            local_path=path,
            size_bytes=size,
        )

    async def store_all(self, uploads: Iterable[IncomingFile]) -> List[FileBlob]:
        """Store every upload; on any failure nothing is left behind."""
        blobs: List[FileBlob] = []
        try:
            for upload in uploads:
                blobs.append(await self.store(upload))
        except BaseException:
            self.discard(blobs)
            raise
        return blobs

    @contextmanager
    def consume(self, blob: FileBlob) -> Iterator[Path]:
        """Yield the blob's path and delete the file however the block exits."""
        try:
            yield blob.local_path
        finally:
            self._remove(blob.local_path)

    def discard(self, blobs: Iterable[FileBlob]) -> None:
        for blob in blobs:
            self._remove(blob.local_path)

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove temp file {}: {}", path, exc)
