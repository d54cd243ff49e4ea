from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from typing import List, Optional
from datetime import datetime, timezone
from bson import ObjectId


from app.collections.booking_models import Booking
from app.collections.enums import BookingStatus


class BookingCRUD:
    """
    Class for managing customer bookings.
    """

    async def create(self, db: AsyncIOMotorDatabase, booking: Booking) -> Booking:
        """
        Insert a new booking.

        Args:
            db: Database instance
            booking: Booking to store

        Returns:
            The stored booking with timestamps
        """
        now = datetime.now(timezone.utc)
        booking.created_at = now
        booking.updated_at = now
        await db.bookings.insert_one(booking.to_document())
        return booking


    async def get(self, db: AsyncIOMotorDatabase, booking_id: ObjectId) -> Optional[Booking]:
        """
        Retrieve a booking by its identifier.

        Args:
            db: Database instance
            booking_id: Booking identifier

        Returns:
            Booking if found, None otherwise
        """
        document = await db.bookings.find_one({"_id": ObjectId(booking_id)})
        return Booking(**document) if document else None


    async def get_all(self, db: AsyncIOMotorDatabase) -> List[Booking]:
        """
        Retrieve every booking, newest first.

        Args:
            db: Database instance

        Returns:
            List of Booking
        """
        cursor = db.bookings.find({}).sort("created_at", DESCENDING)
        documents = await cursor.to_list(length=None)
        return [Booking(**doc) for doc in documents]


    async def update_status(
        self, db: AsyncIOMotorDatabase, booking_id: ObjectId, status: BookingStatus
    ) -> Optional[Booking]:
        """
        Change the status of a booking.

        Args:
            db: Database instance
            booking_id: Booking identifier
            status: New status

        Returns:
            Updated Booking if found, None otherwise
        """
        document = await db.bookings.find_one_and_update(
            {"_id": ObjectId(booking_id)},
            {
                "$set": {
                    "status": BookingStatus(status).value,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return Booking(**document) if document else None


    async def delete(self, db: AsyncIOMotorDatabase, booking_id: ObjectId) -> bool:
        """
        Delete a booking.

        Args:
            db: Database instance
            booking_id: Booking identifier

        Returns:
            True if a record was removed
        """
        result = await db.bookings.delete_one({"_id": ObjectId(booking_id)})
        return result.deleted_count > 0


    async def count_active_for_car(self, db: AsyncIOMotorDatabase, car_id: ObjectId) -> int:
        """
        Count the confirmed bookings that reference a car.

        Args:
            db: Database instance
            car_id: Listing identifier

        Returns:
            Number of active bookings
        """
        return await db.bookings.count_documents(
            {"car_id": ObjectId(car_id), "status": BookingStatus.CONFIRMED.value}
        )


    async def delete_for_car(self, db: AsyncIOMotorDatabase, car_id: ObjectId) -> int:
        """
        Delete every booking that references a car.

        Args:
            db: Database instance
            car_id: Listing identifier

        Returns:
            Number of removed bookings
        """
        result = await db.bookings.delete_many({"car_id": ObjectId(car_id)})
        return result.deleted_count


    async def count_by_status(self, db: AsyncIOMotorDatabase, status: BookingStatus) -> int:
        """Count bookings in a given status."""
        return await db.bookings.count_documents({"status": BookingStatus(status).value})


booking_crud = BookingCRUD()
