import asyncio
from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.collections.enums import BookingStatus
from app.crud import booking_crud, car_crud, contact_crud


class StatsService:
    """
    Service layer for the admin dashboard counters.
    """

    async def get_dashboard_stats(self, db: AsyncIOMotorDatabase) -> schemas.DashboardStats:
        """
        Count cars, confirmed bookings and unread messages concurrently.

        Args:
            db: Database instance

        Returns:
            DashboardStats
        """
        total_cars, new_orders, unread_messages = await asyncio.gather(
            car_crud.count(db),
            booking_crud.count_by_status(db, BookingStatus.CONFIRMED),
            contact_crud.count_unread(db),
        )
        return schemas.DashboardStats(
            total_cars=total_cars,
            new_orders=new_orders,
            unread_messages=unread_messages,
        )


stats_service = StatsService()
