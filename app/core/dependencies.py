from motor.motor_asyncio import AsyncIOMotorDatabase


from app.core.config import settings
from app.database import session_mongo, blob_storage


async def get_mongo_db() -> AsyncIOMotorDatabase:
    """
    Provide the MongoDB database instance.

    Args:
        None

    Returns:
        An instance of AsyncIOMotorDatabase.
    """
    if session_mongo.mongo_manager.db is None:
        raise Exception("MongoDB connection is not initialized.")
    return session_mongo.mongo_manager.db


def get_blob_store() -> blob_storage.BlobStore:
    """
    Provide the blob store holding car listing images.

    Args:
        None

    Returns:
        AzureBlobStore bound to the car container.
    """
    client = blob_storage.get_blob_service_client()
    return blob_storage.AzureBlobStore(
        client.get_container_client(settings.CAR_CONTAINER_NAME)
    )


def get_blog_blob_store() -> blob_storage.BlobStore:
    """
    Provide the blob store holding blog post images.

    Args:
        None

    Returns:
        AzureBlobStore bound to the blog container.
    """
    client = blob_storage.get_blob_service_client()
    return blob_storage.AzureBlobStore(
        client.get_container_client(settings.BLOG_CONTAINER_NAME)
    )
