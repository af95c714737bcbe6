from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from loguru import logger


class UploadStatus(str, Enum):
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ProgressRecord:
    """Progress of one batch; `completed + failed` never exceeds `total`."""

    total: int
    completed: int = 0
    failed: int = 0
    folder_link: Optional[str] = None
    status: UploadStatus = UploadStatus.UPLOADING

    def _check_open(self) -> None:
        if self.completed + self.failed >= self.total:
            raise ValueError("All files of this batch are already accounted for")

    def mark_file_done(self) -> None:
        self._check_open()
        self.completed += 1

    def mark_file_failed(self) -> None:
        self._check_open()
        self.failed += 1

    def finish(self) -> None:
        if self.status is UploadStatus.UPLOADING:
            self.status = UploadStatus.COMPLETED

    def abort(self) -> None:
        if self.status is UploadStatus.UPLOADING:
            self.status = UploadStatus.FAILED


def new_upload_id() -> str:
    return uuid.uuid4().hex


class ProgressStore:
    """
    Process-wide map from upload id to ProgressRecord.

    Entries expire `ttl_seconds` after they were last written and the map
    never holds more than `max_entries`; the least recently written entry
    goes first.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, ProgressRecord]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, upload_id: str) -> Optional[ProgressRecord]:
        with self._lock:
            self._prune()
            entry = self._entries.get(upload_id)
            return entry[1] if entry else None

    def set(self, upload_id: str, record: ProgressRecord) -> None:
        with self._lock:
            self._entries.pop(upload_id, None)
            self._entries[upload_id] = (self._clock() + self.ttl_seconds, record)
            self._prune()
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Progress store full, evicted {}", evicted)

    def evict(self, upload_id: str) -> bool:
        with self._lock:
            return self._entries.pop(upload_id, None) is not None

    def items(self) -> List[Tuple[str, ProgressRecord]]:
        """Snapshot of the live (upload id, record) pairs, oldest first."""
        with self._lock:
            self._prune()
            return [(upload_id, record) for upload_id, (_, record) in self._entries.items()]

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._entries)

    def _prune(self) -> None:
        # Insertion order matches expiry order since every write moves to the end
        now = self._clock()
        while self._entries:
            upload_id, (expires_at, _) = next(iter(self._entries.items()))
            if expires_at > now:
                break
            del self._entries[upload_id]
