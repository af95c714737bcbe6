import pytest

from services.errors import FileTooLargeError
from src.storage.temp_storage import TempStorage, local_name_for


def test_local_name_keeps_original_and_is_unique():
    first = local_name_for("../holiday pic.jpg")
    second = local_name_for("../holiday pic.jpg")
    assert first.endswith("-holiday pic.jpg")
    assert "/" not in first
    assert first != second


@pytest.mark.asyncio
async def test_store_creates_directory_and_writes_file(tmp_path, upload_factory):
    storage = TempStorage(tmp_path / "nested" / "uploads", max_file_size=100)
    blob = await storage.store(upload_factory("a.jpg", b"hello"))
    assert blob.local_path.parent == tmp_path / "nested" / "uploads"
    assert blob.local_path.read_bytes() == b"hello"
    assert blob.size_bytes == 5
    assert blob.original_name == "a.jpg"
    assert blob.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_store_rejects_oversized_file_and_cleans_up(tmp_path, upload_factory):
    storage = TempStorage(tmp_path, max_file_size=4)
    with pytest.raises(FileTooLargeError) as exc_info:
        await storage.store(upload_factory("big.jpg", b"12345"))
    assert exc_info.value.status_code == 413
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_store_all_discards_earlier_files_on_failure(tmp_path, upload_factory):
    storage = TempStorage(tmp_path, max_file_size=4)
    uploads = [upload_factory("ok.jpg", b"1234"), upload_factory("big.jpg", b"123456")]
    with pytest.raises(FileTooLargeError):
        await storage.store_all(uploads)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_consume_deletes_file_even_when_block_raises(tmp_path, upload_factory):
    storage = TempStorage(tmp_path, max_file_size=100)
    blob = await storage.store(upload_factory("a.png", b"data", content_type=None))
    assert blob.mime_type == "application/octet-stream"

    with pytest.raises(RuntimeError):
        with storage.consume(blob) as path:
            assert path.exists()
            raise RuntimeError("remote call failed")
    assert not blob.local_path.exists()


@pytest.mark.asyncio
async def test_discard_ignores_missing_files(tmp_path, upload_factory):
    storage = TempStorage(tmp_path, max_file_size=100)
    blob = await storage.store(upload_factory("a.jpg", b"x"))
    blob.local_path.unlink()
    storage.discard([blob])
