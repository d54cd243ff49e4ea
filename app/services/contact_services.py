from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.collections.content_models import ContactMessage
from app.crud import contact_crud
from app.utils.exception_utils import NotFoundException
from app.utils.logger_utils import get_logger
from app.utils.objectid_utils import parse_object_id
from .notification_services import notification_service


logger = get_logger(__name__)


class ContactService:
    """
    Service layer for messages sent through the contact form.
    """

    async def create_message(
        self, db: AsyncIOMotorDatabase, message_in: schemas.ContactCreate
    ) -> schemas.ContactSubmitted:
        """
        Store a contact message and notify the admins.

        Args:
            db: Database instance
            message_in: Validated message fields

        Returns:
            Acknowledgment with the stored message
        """
        message = await contact_crud.create(db, ContactMessage(**message_in.model_dump()))
        data = schemas.ContactPublic.model_validate(message.to_document())
        logger.info(f"Contact message {message.id} received ({message.inquiry_type})")
        notification_service.publish("newMessage", data.model_dump(mode="json", by_alias=True))
        return schemas.ContactSubmitted(
            message="Thank you for your message! We will get back to you shortly.",
            data=data,
        )


    async def list_messages(self, db: AsyncIOMotorDatabase) -> schemas.ContactList:
        """Retrieve every message, newest first, with the total count."""
        messages = await contact_crud.get_all(db)
        return schemas.ContactList(
            count=len(messages),
            items=[schemas.ContactPublic.model_validate(m.to_document()) for m in messages],
        )


    async def set_read(
        self, db: AsyncIOMotorDatabase, message_id: str, read_in: schemas.ContactReadUpdate
    ) -> ContactMessage:
        """
        Mark a message as read or unread.

        Args:
            db: Database instance
            message_id: Message identifier
            read_in: New read flag

        Returns:
            Updated message

        Raises:
            NotFoundException: If the message does not exist
        """
        oid = parse_object_id(message_id)
        message = await contact_crud.set_read(db, oid, read_in.is_read) if oid else None
        if not message:
            raise NotFoundException("Message not found")
        return message


    async def delete_message(self, db: AsyncIOMotorDatabase, message_id: str) -> schemas.Msg:
        """
        Delete a message.

        Args:
            db: Database instance
            message_id: Message identifier

        Returns:
            Confirmation message

        Raises:
            NotFoundException: If the message does not exist
        """
        oid = parse_object_id(message_id)
        if not oid or not await contact_crud.delete(db, oid):
            raise NotFoundException("Message not found")
        logger.info(f"Contact message {oid} deleted")
        return schemas.Msg(message="Message deleted successfully")


contact_service = ContactService()
