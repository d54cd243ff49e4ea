from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING


from app.core.config import settings
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class MongoManager:
    """
    Manages the asynchronous MongoDB connection and database instance.
    """

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None


mongo_manager = MongoManager()


async def connect_to_mongo():
    """
    Establishes the MongoDB client connection and set the database instance.

    Args:
        None

    Returns:
        None
    """
    mongo_manager.client = AsyncIOMotorClient(settings.MONGO_URI)
    mongo_manager.db = mongo_manager.client[settings.MONGO_DB]

    try:
        await mongo_manager.client.admin.command("ping")
    except Exception as e:
        raise Exception(f"Failed to connect to MongoDB: {e}")


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Creates the indexes the collections rely on, including the unique constraints
    that replace check-then-write uniqueness queries.

    Args:
        db: Target database

    Returns:
        None
    """
    await db.cars.create_index([("slug", ASCENDING)], unique=True, name="uq_cars_slug")
    if settings.ENFORCE_UNIQUE_CAR_NAME:
        await db.cars.create_index(
            [("brand", ASCENDING), ("name", ASCENDING)],
            unique=True,
            name="uq_cars_brand_name",
        )
    await db.cars.create_index([("type", ASCENDING)], name="ix_cars_type")
    await db.cars.create_index([("created_at", DESCENDING)], name="ix_cars_created_at")

    await db.bookings.create_index(
        [("car_id", ASCENDING), ("status", ASCENDING)], name="ix_bookings_car_status"
    )
    await db.blog_posts.create_index(
        [("slug", ASCENDING)], unique=True, name="uq_blog_posts_slug"
    )
    await db.users.create_index([("email", ASCENDING)], unique=True, name="uq_users_email")
    logger.info("MongoDB indexes ensured.")


async def close_mongo_connection():
    """
    Closes the MongoDB client connection.

    Args:
        None

    Returns:
        None
    """
    if mongo_manager.client:
        mongo_manager.client.close()
        mongo_manager.client = None
        mongo_manager.db = None
