from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account
from loguru import logger

from src.config.settings import Settings, get_settings

DRIVE_API = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_API = "https://www.googleapis.com/upload/drive/v3"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


@dataclass(frozen=True)
class RemoteFolder:
    id: str
    name: str
    link: str


@dataclass(frozen=True)
class RemoteFile:
    id: str
    name: str


class DriveConnector:
    """
    Google Drive bridge over the v3 REST API.

    - Auth via a google-auth service account wrapped in AuthorizedSession.
    - Creates order folders, shares them, and uploads files into them.
    - Every non-2xx response raises requests.HTTPError.
    """

    def __init__(self, session: requests.Session) -> None:
        self.session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> "DriveConnector":
        credentials = service_account.Credentials.from_service_account_info(
            settings.service_account_info(), scopes=settings.drive_scopes
        )
        logger.debug(
            "Initialized Drive session client_email={} scopes={}",
            settings.google_client_email,
            settings.drive_scopes,
        )
        return cls(AuthorizedSession(credentials))

    def create_folder(self, name: str) -> RemoteFolder:
        logger.debug("Creating Drive folder name={}", name)
        resp = self.session.post(
            f"{DRIVE_API}/files",
            params={"fields": "id, name, webViewLink"},
            json={"name": name, "mimeType": FOLDER_MIME_TYPE},
        )
        resp.raise_for_status()
        data = resp.json()
        folder = RemoteFolder(id=data["id"], name=data.get("name", name), link=data.get("webViewLink", ""))
        logger.debug("Created Drive folder id={} link={}", folder.id, folder.link)
        return folder

    def grant_public_read(self, folder_id: str) -> None:
        """Make the folder readable by anyone holding its link."""
        logger.debug("Granting anyone-with-link read access folder_id={}", folder_id)
        resp = self.session.post(
            f"{DRIVE_API}/files/{folder_id}/permissions",
            json={"role": "reader", "type": "anyone"},
        )
        resp.raise_for_status()

    def upload_file(self, path: Path, name: str, mime_type: str, folder_id: str) -> RemoteFile:
        """
        Upload a local file into `folder_id` with a resumable session.

        The first request registers the metadata, the second sends the
        file bytes to the session URL Drive hands back.
        """
        size = os.path.getsize(path)
        logger.debug("Opening upload session name={} size={} folder_id={}", name, size, folder_id)
        init = self.session.post(
            f"{DRIVE_UPLOAD_API}/files",
            params={"uploadType": "resumable", "fields": "id, name"},
            headers={
                "X-Upload-Content-Type": mime_type,
                "X-Upload-Content-Length": str(size),
            },
            json={"name": name, "parents": [folder_id]},
        )
        init.raise_for_status()
        session_url = init.headers.get("Location")
        if not session_url:
            raise RuntimeError("Drive did not return an upload session URL")

        # Bytes, not a handle: AuthorizedSession resends the body after a token refresh
        body = Path(path).read_bytes()
        resp = self.session.put(
            session_url,
            data=body,
            headers={"Content-Type": mime_type, "Content-Length": str(len(body))},
        )
        resp.raise_for_status()
        data = resp.json()
        remote = RemoteFile(id=data["id"], name=data.get("name", name))
        logger.debug("Uploaded {} as file_id={}", name, remote.id)
        return remote


if __name__ == "__main__":
    """
    Manual smoke test: creates a private folder with the configured
    service account. Requires GOOGLE_* env vars.
    """
    from datetime import datetime

    connector = DriveConnector.from_settings(get_settings())
    try:
        created = connector.create_folder(f"smoke-test-{datetime.now():%Y%m%d-%H%M%S}")
        logger.info("Created folder {} -> {}", created.id, created.link)
    except Exception as exc:  # pragma: no cover - network call
        logger.error("Drive smoke run failed: {}", exc)
