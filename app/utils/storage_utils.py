import asyncio
import os
from typing import Dict, Iterable, List, Sequence, Tuple


from app.core.config import settings
from app.database.blob_storage import BlobStore, StoredBlob
from app.schemas.utility_schemas import ImageUpload
from app.utils.exception_utils import StorageException, ValidationException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


ALLOWED_IMAGE_TYPES: Dict[str, Tuple[str, ...]] = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/jpg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/gif": (".gif",),
    "image/webp": (".webp",),
}


def validate_uploads(uploads: Sequence[ImageUpload], field: str = "images") -> None:
    """
    Check MIME type, extension and size of every upload before anything is stored.

    Args:
        uploads: Files read from the request
        field: Form field name used in error locations

    Raises:
        ValidationException: Listing every offending file as ``field[index]``
    """
    max_bytes = settings.MAX_IMAGE_SIZE_MB * 1024 * 1024
    errors = []
    for idx, upload in enumerate(uploads):
        location = f"{field}[{idx}]"
        content_type = (upload.content_type or "").lower()
        extension = os.path.splitext(upload.filename or "")[1].lower()
        allowed = ALLOWED_IMAGE_TYPES.get(content_type)
        if not allowed or extension not in allowed:
            errors.append(
                {
                    "field": location,
                    "message": "Invalid file type. Only JPEG, JPG, PNG, GIF, WEBP are allowed",
                }
            )
        elif upload.size_bytes == 0:
            errors.append({"field": location, "message": "File is empty"})
        elif upload.size_bytes > max_bytes:
            errors.append(
                {
                    "field": location,
                    "message": f"File size must be less than {settings.MAX_IMAGE_SIZE_MB}MB",
                }
            )
    if errors:
        raise ValidationException(detail="Invalid image upload", fields=errors)


async def discard_blobs(blob_store: BlobStore, stored_names: Iterable[str]) -> List[str]:
    """
    Delete blobs concurrently, best effort. Failures are logged and never raised.

    Args:
        blob_store: Store holding the blobs
        stored_names: Names returned by ``BlobStore.put``

    Returns:
        Names that could not be deleted
    """
    names = [name for name in dict.fromkeys(stored_names) if name]
    if not names:
        return []
    results = await asyncio.gather(
        *(blob_store.delete(name) for name in names), return_exceptions=True
    )
    failed = []
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            logger.warning(f"Could not delete blob {name}: {result}")
            failed.append(name)
    return failed


async def store_uploads(
    blob_store: BlobStore, uploads: Sequence[ImageUpload], folder: str = ""
) -> List[StoredBlob]:
    """
    Write every upload concurrently. If any write fails, or the caller is cancelled while
    the batch is in flight, the ones that succeeded are deleted again so the batch leaves
    nothing behind.

    Args:
        blob_store: Destination store
        uploads: Files to write, in submission order
        folder: Virtual directory for the new blobs

    Returns:
        StoredBlob per upload, in submission order

    Raises:
        StorageException: If at least one write failed
    """
    if not uploads:
        return []
    tasks = [
        asyncio.ensure_future(
            blob_store.put(upload.data, upload.content_type, upload.filename, folder)
        )
        for upload in uploads
    ]
    try:
        results = await asyncio.gather(*tasks, return_exceptions=True)
    except asyncio.CancelledError:
        finished = [
            task.result().stored_name
            for task in tasks
            if task.done() and not task.cancelled() and task.exception() is None
        ]
        logger.warning(f"Upload batch cancelled, discarding {len(finished)} stored blobs")
        await asyncio.shield(discard_blobs(blob_store, finished))
        raise
    failures = [result for result in results if isinstance(result, BaseException)]
    stored = [result for result in results if not isinstance(result, BaseException)]
    if failures:
        logger.error(f"{len(failures)} of {len(uploads)} uploads failed: {failures[0]}")
        await discard_blobs(blob_store, [blob.stored_name for blob in stored])
        raise StorageException("Failed to store uploaded images") from failures[0]
    return stored
