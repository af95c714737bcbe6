"""Photo batch upload business logic."""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from loguru import logger

from services.errors import (
    EmptyBatchError,
    FileUploadError,
    TooManyFilesError,
    UploadNotFoundError,
)
from services.folder_service import provision_folder
from src.bridge.drive_connector import DriveConnector, RemoteFile
from src.config.settings import Settings
from src.progress.store import ProgressRecord, ProgressStore, new_upload_id
from src.storage.temp_storage import FileBlob, IncomingFile, TempStorage


@dataclass
class UploadBatch:
    customer_name: str
    order_number: str
    files: Sequence[IncomingFile] = field(default_factory=list)


@dataclass(frozen=True)
class FileOutcome:
    name: str
    file_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    upload_id: str
    folder_link: str
    outcomes: List[FileOutcome]

    @property
    def uploaded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def message(self) -> str:
        total = len(self.outcomes)
        if not self.failed:
            return f"Successfully uploaded {total} photos"
        return f"Uploaded {len(self.uploaded)} of {total} photos ({len(self.failed)} failed)"


def upload_one(
    connector: DriveConnector,
    storage: TempStorage,
    blob: FileBlob,
    folder_id: str,
) -> RemoteFile:
    """Send one staged file to Drive; the local copy is removed either way."""
    with storage.consume(blob) as path:
        try:
            return connector.upload_file(path, blob.original_name, blob.mime_type, folder_id)
        except Exception as e:
            logger.error("Error uploading file {}: {}", blob.original_name, e)
            raise FileUploadError(blob.original_name, str(e)) from e


async def _upload_all(
    blobs: List[FileBlob],
    folder_id: str,
    upload_id: str,
    record: ProgressRecord,
    *,
    connector: DriveConnector,
    storage: TempStorage,
    store: ProgressStore,
    concurrency: int,
) -> List[FileOutcome]:
    loop = asyncio.get_running_loop()

    pool = ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="drive-upload")

    async def run(blob: FileBlob) -> FileOutcome:
        try:
            remote = await loop.run_in_executor(
                pool, upload_one, connector, storage, blob, folder_id
            )
        except FileUploadError as e:
            record.mark_file_failed()
            store.set(upload_id, record)
            return FileOutcome(name=blob.original_name, error=e.message)

        record.mark_file_done()
        store.set(upload_id, record)
        logger.debug(
            "Upload {} progress {}/{}", upload_id, record.completed, record.total
        )
        return FileOutcome(name=blob.original_name, file_id=remote.id)

    try:
        return list(await asyncio.gather(*(run(blob) for blob in blobs)))
    finally:
        # In-flight uploads finish in their threads; queued ones are dropped with their files
        pool.shutdown(wait=False, cancel_futures=True)
        storage.discard(blobs)


async def handle_upload_batch(
    batch: UploadBatch,
    *,
    get_connector: Callable[[], DriveConnector],
    storage: TempStorage,
    store: ProgressStore,
    settings: Settings,
) -> BatchResult:
    """
    Stage, provision and upload one batch of photos.

    Flow:
    1. Reject empty or oversized batches
    2. Stage every file on disk (size limit enforced before any Drive call)
    3. Register a progress record under a fresh upload id
    4. Create the order folder on Drive
    5. Upload the files through a fixed-size worker pool
    6. Mark the record completed and report per-file outcomes

    Args:
        batch: Order metadata plus the incoming files
        get_connector: Returns the Drive bridge; only called once files are staged
        storage: Temporary file staging area
        store: Progress store shared with the progress endpoint
        settings: Limits, concurrency and folder sharing flag

    Returns:
        BatchResult with upload id, folder link and per-file outcomes

    Raises:
        ClientError: for empty batches, too many files or an oversized file
        ProvisioningError: if the folder cannot be created or shared
    """
    files = list(batch.files)
    if not files:
        raise EmptyBatchError()
    if len(files) > settings.max_files_per_batch:
        raise TooManyFilesError(len(files), settings.max_files_per_batch)

    blobs = await storage.store_all(files)

    upload_id = new_upload_id()
    record = ProgressRecord(total=len(blobs))
    store.set(upload_id, record)
    logger.info(
        "Upload {} started: {} files for {} order {}",
        upload_id,
        len(blobs),
        batch.customer_name,
        batch.order_number,
    )

    loop = asyncio.get_running_loop()
    try:
        connector = get_connector()
        folder = await loop.run_in_executor(
            None,
            provision_folder,
            connector,
            batch.customer_name,
            batch.order_number,
            settings.drive_public_folders,
        )
    except BaseException:
        storage.discard(blobs)
        record.abort()
        store.set(upload_id, record)
        raise

    record.folder_link = folder.link
    store.set(upload_id, record)

    outcomes = await _upload_all(
        blobs,
        folder.id,
        upload_id,
        record,
        connector=connector,
        storage=storage,
        store=store,
        concurrency=settings.upload_concurrency,
    )

    record.finish()
    store.set(upload_id, record)

    result = BatchResult(upload_id=upload_id, folder_link=folder.link, outcomes=outcomes)
    logger.info(
        "Upload {} finished: {} uploaded, {} failed",
        upload_id,
        len(result.uploaded),
        len(result.failed),
    )
    return result


def get_progress(store: ProgressStore, upload_id: str) -> ProgressRecord:
    record = store.get(upload_id)
    if record is None:
        raise UploadNotFoundError(upload_id)
    return record
