from motor.motor_asyncio import AsyncIOMotorDatabase


from app.auth.security import get_password_hash
from app.collections.enums import UserRole
from app.collections.user_models import User
from app.core.config import settings
from app.crud import user_crud
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


async def seed_super_admin(db: AsyncIOMotorDatabase) -> bool:
    """
    Create the default administrator account if it does not exist yet.

    Args:
        db (AsyncIOMotorDatabase): Target database.

    Returns:
        bool: True if the account was created.
    """
    if await user_crud.get_by_email(db, settings.SUPER_ADMIN_EMAIL):
        logger.info("Super admin already present, skipping seed.")
        return False

    await user_crud.create(
        db,
        User(
            name=settings.SUPER_ADMIN_NAME,
            email=settings.SUPER_ADMIN_EMAIL.lower(),
            hashed_password=get_password_hash(settings.SUPER_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        ),
    )
    logger.info(f"Super admin {settings.SUPER_ADMIN_EMAIL} seeded.")
    return True
