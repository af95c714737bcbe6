"""Order folder provisioning."""
from datetime import datetime
from typing import Optional

from loguru import logger

from services.errors import ProvisioningError
from src.bridge.drive_connector import DriveConnector, RemoteFolder


def build_folder_name(customer_name: str, order_number: str, now: Optional[datetime] = None) -> str:
    """Folder name unique per order via a millisecond timestamp suffix."""
    stamp = int((now or datetime.now()).timestamp() * 1000)
    return f"{customer_name}-ORDER-{order_number}-{stamp}"


def provision_folder(
    connector: DriveConnector,
    customer_name: str,
    order_number: str,
    public: bool = True,
) -> RemoteFolder:
    """
    Create the Drive folder for one order.

    Args:
        connector: Drive bridge used for the remote calls
        customer_name: Customer name from the upload form
        order_number: Order number from the upload form
        public: Grant anyone-with-link read access to the new folder

    Returns:
        The created RemoteFolder with its shareable link

    Raises:
        ProvisioningError: if either remote call fails
    """
    name = build_folder_name(customer_name, order_number)
    try:
        folder = connector.create_folder(name)
        if public:
            connector.grant_public_read(folder.id)
    except Exception as e:
        logger.error("Provisioning folder {} failed: {}", name, e)
        raise ProvisioningError(f"Could not create folder '{name}': {e}") from e

    logger.info("Provisioned folder {} (public={}) -> {}", folder.name, public, folder.link)
    return folder
