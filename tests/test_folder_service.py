from datetime import datetime, timezone

import pytest

from services.errors import ProvisioningError
from services.folder_service import build_folder_name, provision_folder


def test_build_folder_name_has_timestamp_suffix():
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    name = build_folder_name("Ana", "42", now)
    assert name == f"Ana-ORDER-42-{int(now.timestamp() * 1000)}"


def test_provision_folder_shares_publicly_when_enabled(fake_drive):
    folder = provision_folder(fake_drive, "Ana", "42", public=True)
    assert folder.name.startswith("Ana-ORDER-42-")
    assert fake_drive.shared == [folder.id]


def test_provision_folder_private_skips_permission_call(fake_drive):
    provision_folder(fake_drive, "Ana", "42", public=False)
    assert fake_drive.shared == []


def test_provision_folder_wraps_remote_failure(drive_factory):
    drive = drive_factory(fail_folder=True)
    with pytest.raises(ProvisioningError) as exc_info:
        provision_folder(drive, "Ana", "42")
    assert exc_info.value.status_code == 500
    assert "403" in exc_info.value.message
