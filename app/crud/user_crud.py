from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from bson import ObjectId


from app.collections.user_models import User


class UserCRUD:
    """
    Class for managing back-office user accounts.
    """

    async def get_by_id(self, db: AsyncIOMotorDatabase, user_id: ObjectId) -> Optional[User]:
        """
        Fetch a user by ID.

        Args:
            db: Database instance
            user_id: User ID

        Returns:
            User object if found, else None
        """
        document = await db.users.find_one({"_id": ObjectId(user_id)})
        return User(**document) if document else None


    async def get_by_email(self, db: AsyncIOMotorDatabase, email: str) -> Optional[User]:
        """
        Fetch user by email.

        Args:
            db: Database instance
            email: Email address

        Returns:
            User if exists, else None
        """
        document = await db.users.find_one({"email": email.lower()})
        return User(**document) if document else None


    async def create(self, db: AsyncIOMotorDatabase, user: User) -> User:
        """
        Insert a new user.

        Args:
            db: Database instance
            user: User to store

        Returns:
            The stored user with timestamps

        Raises:
            DuplicateKeyError: If the email is already registered
        """
        now = datetime.now(timezone.utc)
        user.created_at = now
        user.updated_at = now
        await db.users.insert_one(user.to_document())
        return user


    async def update(
        self, db: AsyncIOMotorDatabase, user_id: ObjectId, update_data: Dict[str, Any]
    ) -> Optional[User]:
        """
        Update fields of a user.

        Args:
            db: Database instance
            user_id: User ID
            update_data: Fields to overwrite

        Returns:
            Updated user if found, else None

        Raises:
            DuplicateKeyError: If the new email is already registered
        """
        update_data = {**update_data, "updated_at": datetime.now(timezone.utc)}
        await db.users.update_one({"_id": ObjectId(user_id)}, {"$set": update_data})
        return await self.get_by_id(db, user_id)


user_crud = UserCRUD()
