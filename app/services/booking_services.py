from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.collections.booking_models import Booking
from app.crud import booking_crud, car_crud
from app.utils.exception_utils import NotFoundException
from app.utils.logger_utils import get_logger
from app.utils.objectid_utils import parse_object_id
from .notification_services import notification_service


logger = get_logger(__name__)


class BookingService:
    """
    Service class for handling customer bookings.
    """

    def _with_car(
        self, booking: Booking, car: Optional[Dict[str, Any]]
    ) -> schemas.BookingWithCar:
        data = booking.to_document()
        data["car"] = car
        return schemas.BookingWithCar.model_validate(data)


    async def _get_booking(self, db: AsyncIOMotorDatabase, booking_id: str) -> Booking:
        oid = parse_object_id(booking_id)
        booking = await booking_crud.get(db, oid) if oid else None
        if not booking:
            raise NotFoundException("Booking not found")
        return booking


    async def create_booking(
        self, db: AsyncIOMotorDatabase, booking_in: schemas.BookingCreate
    ) -> schemas.BookingWithCar:
        """
        Register a booking request on an existing car and notify the admins.

        Args:
            db: Database instance
            booking_in: Validated booking data

        Returns:
            The stored booking populated with the car summary

        Raises:
            NotFoundException: If the car does not exist
        """
        car = await car_crud.get_by_id(db, booking_in.car_id)
        if not car:
            raise NotFoundException("Car not found")

        booking = await booking_crud.create(db, Booking(**booking_in.model_dump()))
        result = self._with_car(
            booking,
            {
                "_id": car.id,
                "name": car.name,
                "brand": car.brand,
                "thumbnail": car.thumbnail.model_dump(),
            },
        )
        logger.info(f"Booking {booking.id} created for car {car.id}")
        notification_service.publish("newOrder", result.model_dump(mode="json", by_alias=True))
        return result


    async def list_bookings(self, db: AsyncIOMotorDatabase) -> List[schemas.BookingWithCar]:
        """
        Retrieve every booking, newest first, populated with its car. Bookings whose car
        no longer exists are left out.

        Args:
            db: Database instance

        Returns:
            List of BookingWithCar
        """
        bookings = await booking_crud.get_all(db)
        cars = await car_crud.get_summaries(db, {b.car_id for b in bookings})
        return [
            self._with_car(booking, cars[booking.car_id])
            for booking in bookings
            if booking.car_id in cars
        ]


    async def update_status(
        self,
        db: AsyncIOMotorDatabase,
        booking_id: str,
        status_in: schemas.BookingStatusUpdate,
    ) -> schemas.BookingWithCar:
        """
        Change the status of a booking.

        Args:
            db: Database instance
            booking_id: Booking identifier
            status_in: New status

        Returns:
            The updated booking populated with its car

        Raises:
            NotFoundException: If the booking does not exist
        """
        booking = await self._get_booking(db, booking_id)
        updated = await booking_crud.update_status(db, booking.id, status_in.status)
        if not updated:
            raise NotFoundException("Booking not found")
        cars = await car_crud.get_summaries(db, [updated.car_id])
        logger.info(f"Booking {updated.id} status set to {updated.status}")
        return self._with_car(updated, cars.get(updated.car_id))


    async def delete_booking(self, db: AsyncIOMotorDatabase, booking_id: str) -> schemas.Msg:
        """
        Delete a booking.

        Args:
            db: Database instance
            booking_id: Booking identifier

        Returns:
            Confirmation message

        Raises:
            NotFoundException: If the booking does not exist
        """
        booking = await self._get_booking(db, booking_id)
        if not await booking_crud.delete(db, booking.id):
            raise NotFoundException("Booking not found")
        logger.info(f"Booking {booking.id} deleted")
        return schemas.Msg(message="Booking removed")


booking_service = BookingService()
