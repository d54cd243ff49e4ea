from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.user_models import User
from app.core.dependencies import get_mongo_db
from app.services import contact_service


router = APIRouter()


@router.post("", response_model=schemas.ContactSubmitted, status_code=status.HTTP_201_CREATED)
async def create_contact_message(
    message_in: schemas.ContactCreate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Send a message through the contact form.

    Args:
        message_in: Sender details and message
        db: Database dependency

    Returns:
        Acknowledgment with the stored message
    """
    return await contact_service.create_message(db, message_in)


@router.get("", response_model=schemas.ContactList)
async def list_contact_messages(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """List every contact message, newest first."""
    return await contact_service.list_messages(db)


@router.patch("/{message_id}/read", response_model=schemas.ContactPublic)
async def update_read_status(
    message_id: str,
    read_in: schemas.ContactReadUpdate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Mark a contact message as read or unread.

    Args:
        message_id: Message identifier
        read_in: New read flag
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        The updated message
    """
    return await contact_service.set_read(db, message_id, read_in)


@router.delete("/{message_id}", response_model=schemas.Msg)
async def delete_contact_message(
    message_id: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """Delete a contact message."""
    return await contact_service.delete_message(db, message_id)
