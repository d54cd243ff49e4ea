from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List


from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.user_models import User
from app.core.dependencies import get_mongo_db
from app.services import booking_service


router = APIRouter()


@router.post("", response_model=schemas.BookingCreated, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_in: schemas.BookingCreate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Submit a booking request for a car.

    Args:
        booking_in: Customer details, rental dates and quoted price
        db: Database dependency

    Returns:
        Confirmation with the stored booking
    """
    booking = await booking_service.create_booking(db, booking_in)
    return schemas.BookingCreated(message="Booking successful!", booking=booking)


@router.get("", response_model=List[schemas.BookingWithCar])
async def list_bookings(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    List every booking, newest first, with the booked car.

    Args:
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        Bookings populated with car name, brand and thumbnail
    """
    return await booking_service.list_bookings(db)


@router.patch("/{booking_id}/status", response_model=schemas.BookingWithCar)
async def update_booking_status(
    booking_id: str,
    status_in: schemas.BookingStatusUpdate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Change the status of a booking.

    Args:
        booking_id: Booking identifier
        status_in: New status (confirmed, completed or cancelled)
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        The updated booking
    """
    return await booking_service.update_status(db, booking_id, status_in)


@router.delete("/{booking_id}", response_model=schemas.Msg)
async def delete_booking(
    booking_id: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Delete a booking.

    Args:
        booking_id: Booking identifier
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        Confirmation message
    """
    return await booking_service.delete_booking(db, booking_id)
