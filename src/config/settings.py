from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from services.errors import DriveConfigurationError


class Settings(BaseSettings):
    """Centralized configuration loaded from environment variables or .env."""

    google_type: Optional[str] = Field("service_account", alias="GOOGLE_TYPE")
    google_project_id: Optional[str] = Field(None, alias="GOOGLE_PROJECT_ID")
    google_private_key_id: Optional[str] = Field(None, alias="GOOGLE_PRIVATE_KEY_ID")
    google_private_key: Optional[str] = Field(None, alias="GOOGLE_PRIVATE_KEY")
    google_client_email: Optional[str] = Field(None, alias="GOOGLE_CLIENT_EMAIL")
    google_client_id: Optional[str] = Field(None, alias="GOOGLE_CLIENT_ID")
    google_auth_uri: Optional[str] = Field(
        "https://accounts.google.com/o/oauth2/auth", alias="GOOGLE_AUTH_URI"
    )
    google_token_uri: Optional[str] = Field(
        "https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URI"
    )
    google_auth_provider_cert_url: Optional[str] = Field(
        "https://www.googleapis.com/oauth2/v1/certs", alias="GOOGLE_AUTH_PROVIDER_CERT_URL"
    )
    google_client_cert_url: Optional[str] = Field(None, alias="GOOGLE_CLIENT_CERT_URL")

    drive_scopes: List[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/drive.file"],
        alias="DRIVE_SCOPES",
    )
    # Anyone with the folder link can read its photos when enabled.
    drive_public_folders: bool = Field(True, alias="DRIVE_PUBLIC_FOLDERS")

    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    upload_dir: str = Field("./uploads", alias="UPLOAD_DIR")
    max_file_size_bytes: int = Field(10 * 1024 * 1024, alias="MAX_FILE_SIZE_BYTES")
    max_files_per_batch: int = Field(10, alias="MAX_FILES_PER_BATCH")
    upload_concurrency: int = Field(3, ge=1, alias="UPLOAD_CONCURRENCY")

    progress_ttl_seconds: float = Field(3600, gt=0, alias="PROGRESS_TTL_SECONDS")
    progress_max_entries: int = Field(1000, ge=1, alias="PROGRESS_MAX_ENTRIES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def service_account_info(self) -> Dict[str, Any]:
        """Return the credential fields in Google's service-account JSON shape."""
        missing = [
            name
            for name, value in (
                ("GOOGLE_PRIVATE_KEY", self.google_private_key),
                ("GOOGLE_CLIENT_EMAIL", self.google_client_email),
                ("GOOGLE_TOKEN_URI", self.google_token_uri),
            )
            if not value
        ]
        if missing:
            raise DriveConfigurationError(
                f"Missing Google service account settings: {', '.join(missing)}"
            )
        # .env files usually carry the PEM key with escaped newlines
        private_key = self.google_private_key.replace("\\n", "\n")
        return {
            "type": self.google_type,
            "project_id": self.google_project_id,
            "private_key_id": self.google_private_key_id,
            "private_key": private_key,
            "client_email": self.google_client_email,
            "client_id": self.google_client_id,
            "auth_uri": self.google_auth_uri,
            "token_uri": self.google_token_uri,
            "auth_provider_x509_cert_url": self.google_auth_provider_cert_url,
            "client_x509_cert_url": self.google_client_cert_url,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[arg-type]
