from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from typing import List, Optional
from datetime import datetime, timezone
from bson import ObjectId


from app.collections.content_models import ContactMessage


class ContactCRUD:
    """
    Class for managing contact form messages.
    """

    async def create(
        self, db: AsyncIOMotorDatabase, message: ContactMessage
    ) -> ContactMessage:
        """
        Insert a new contact message.

        Args:
            db: Database instance
            message: Message to store

        Returns:
            The stored message with timestamps
        """
        now = datetime.now(timezone.utc)
        message.created_at = now
        message.updated_at = now
        await db.contacts.insert_one(message.to_document())
        return message


    async def get_all(self, db: AsyncIOMotorDatabase) -> List[ContactMessage]:
        """
        Retrieve every contact message, newest first.

        Args:
            db: Database instance

        Returns:
            List of ContactMessage
        """
        cursor = db.contacts.find({}).sort("created_at", DESCENDING)
        documents = await cursor.to_list(length=None)
        return [ContactMessage(**doc) for doc in documents]


    async def set_read(
        self, db: AsyncIOMotorDatabase, message_id: ObjectId, is_read: bool
    ) -> Optional[ContactMessage]:
        """
        Mark a message as read or unread.

        Args:
            db: Database instance
            message_id: Message identifier
            is_read: New read flag

        Returns:
            Updated ContactMessage if found, None otherwise
        """
        document = await db.contacts.find_one_and_update(
            {"_id": ObjectId(message_id)},
            {"$set": {"is_read": is_read, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        return ContactMessage(**document) if document else None


    async def delete(self, db: AsyncIOMotorDatabase, message_id: ObjectId) -> bool:
        """
        Delete a contact message.

        Args:
            db: Database instance
            message_id: Message identifier

        Returns:
            True if a record was removed
        """
        result = await db.contacts.delete_one({"_id": ObjectId(message_id)})
        return result.deleted_count > 0


    async def count_unread(self, db: AsyncIOMotorDatabase) -> int:
        """Count messages not yet read."""
        return await db.contacts.count_documents({"is_read": False})


contact_crud = ContactCRUD()
