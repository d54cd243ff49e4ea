from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase


from app.collections.user_models import User
from app.core.config import settings
from app.core.dependencies import get_mongo_db
from app.utils.exception_utils import CredentialsException, ForbiddenException
from app.utils.objectid_utils import parse_object_id
from app.crud import user_crud
from app.auth import security


oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_STR}/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
) -> User:
    """
    Retrieve the currently authenticated user based on the provided JWT access token.

    Args:
        token (str): JWT access token.
        db (AsyncIOMotorDatabase): Database instance.

    Returns:
        User: Authenticated user document.
    """
    payload = security.decode_token(
        token=token, secret_key=settings.ACCESS_TOKEN_SECRET_KEY
    )
    if payload.type != "access":
        raise CredentialsException(detail="Invalid token type")

    user_id = parse_object_id(payload.sub)
    user = await user_crud.get_by_id(db, user_id) if user_id else None
    if not user:
        raise CredentialsException(detail="User not found")
    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """
    Allow only administrators through.

    Args:
        user (User): Authenticated user.

    Returns:
        User: The same user when it is an administrator.
    """
    if not security.is_admin(user):
        raise ForbiddenException(detail="Admin access required")
    return user
