"""Error types raised by the upload gateway."""


class GatewayError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(GatewayError):
    """The request itself is wrong; reported back verbatim."""

    status_code = 400


class EmptyBatchError(ClientError):
    def __init__(self) -> None:
        super().__init__("No files uploaded")


class TooManyFilesError(ClientError):
    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Too many files: {count} (max {limit})")


class FileTooLargeError(ClientError):
    status_code = 413

    def __init__(self, filename: str, limit: int) -> None:
        super().__init__(f"File '{filename}' exceeds the {limit} byte limit")
        self.filename = filename


class UploadNotFoundError(ClientError):
    status_code = 404

    def __init__(self, upload_id: str) -> None:
        super().__init__("Upload not found")
        self.upload_id = upload_id


class ProvisioningError(GatewayError):
    """Creating the order folder or sharing it failed."""


class DriveConfigurationError(GatewayError):
    """Google credentials are missing or unusable."""


class FileUploadError(GatewayError):
    """A single file could not be sent to Drive."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename
