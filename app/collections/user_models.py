from .base import BaseMongoModel
from .enums import UserRole


class User(BaseMongoModel):
    """
    Collection document for a back-office account.
    """

    name: str
    email: str
    hashed_password: str
    role: UserRole = UserRole.ADMIN
