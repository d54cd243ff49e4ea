import os
import re
import uuid
from typing import Optional, Protocol
from pydantic import BaseModel
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError


from app.core.config import settings
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class StoredBlob(BaseModel):
    """
    Durable reference to a file written to the blob store.
    """

    reference: str
    stored_name: str
    size_bytes: int
    content_type: str
    original_name: str = ""


class BlobStore(Protocol):
    """
    Interface of the binary file store used for images.
    """

    async def put(
        self, data: bytes, content_type: str, original_name: str, folder: str = ""
    ) -> StoredBlob: ...

    async def delete(self, stored_name: str) -> bool: ...


def build_stored_name(original_name: str, folder: str = "") -> str:
    """
    Build a collision-free blob name that keeps a readable part of the original file name.

    Args:
        original_name: File name supplied by the client
        folder: Optional virtual directory prefix

    Returns:
        Blob name such as ``cars/<id>/front_view-<uuid>.jpg``
    """
    stem, ext = os.path.splitext(original_name or "")
    sanitized = re.sub(r"[^a-zA-Z0-9]", "_", stem).strip("_").lower() or "file"
    name = f"{sanitized[:40]}-{uuid.uuid4().hex}{ext.lower()}"
    folder = folder.strip("/")
    return f"{folder}/{name}" if folder else name


class AzureBlobStore:
    """
    Blob store backed by a single Azure Storage container.
    """

    def __init__(self, container_client: ContainerClient):
        self.container_client = container_client

    async def put(
        self, data: bytes, content_type: str, original_name: str, folder: str = ""
    ) -> StoredBlob:
        """
        Uploads a file under a fresh name and returns its URL.

        Args:
            data: File content
            content_type: MIME type stored with the blob
            original_name: Client file name, used for the extension and a readable prefix
            folder: Optional virtual directory

        Returns:
            StoredBlob describing the written file
        """
        stored_name = build_stored_name(original_name, folder)
        blob_client = self.container_client.get_blob_client(stored_name)
        await blob_client.upload_blob(
            data,
            overwrite=False,
            content_settings=ContentSettings(content_type=content_type),
        )
        return StoredBlob(
            reference=blob_client.url,
            stored_name=stored_name,
            size_bytes=len(data),
            content_type=content_type,
            original_name=original_name or "",
        )

    async def delete(self, stored_name: str) -> bool:
        """
        Deletes a blob by name. Deleting a missing blob is not an error.

        Args:
            stored_name: Name returned by ``put``

        Returns:
            True if the blob existed, False if it was already gone
        """
        blob_client = self.container_client.get_blob_client(stored_name)
        try:
            await blob_client.delete_blob()
            return True
        except ResourceNotFoundError:
            logger.info(f"Blob {stored_name} already deleted")
            return False


class BlobManager:
    """
    Holds the Azure Blob Service client for the lifetime of the application.
    """

    client: Optional[BlobServiceClient] = None


blob_manager = BlobManager()


def connect_blob_storage() -> None:
    """
    Creates the Azure Blob Service client from the configured connection string.

    Args:
        None

    Returns:
        None
    """
    blob_manager.client = BlobServiceClient.from_connection_string(
        settings.AZURE_STORAGE_CONNECTION_STRING
    )


def get_blob_service_client() -> BlobServiceClient:
    """
    Returns the Azure Blob Service client.

    Args:
        None

    Returns:
        BlobServiceClient: The Azure Blob Service client.
    """
    if blob_manager.client is None:
        raise RuntimeError("Blob storage client is not initialized.")
    return blob_manager.client


async def close_blob_service_client():
    """
    Closes the Azure Blob Service client connection.

    Args:
        None

    Returns:
        None
    """
    if blob_manager.client is not None:
        await blob_manager.client.close()
        blob_manager.client = None


async def verify_containers() -> None:
    """
    Ensure Azure Blob containers exist, creates them if missing.

    Args:
        None

    Returns:
        None
    """
    client = get_blob_service_client()
    for name in [settings.CAR_CONTAINER_NAME, settings.BLOG_CONTAINER_NAME]:
        container_client = client.get_container_client(name)
        try:
            await container_client.create_container(public_access="blob")

        except ResourceExistsError:
            continue

        except Exception as exc:
            raise RuntimeError(
                f"Failed to ensure Azure Blob container '{name}'. "
                f"Application startup aborted."
            ) from exc
