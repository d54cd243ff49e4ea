from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """
    Schema for admin dashboard counters.
    """
    total_cars: int = Field(..., description="Number of car listings")
    new_orders: int = Field(..., description="Number of confirmed bookings")
    unread_messages: int = Field(..., description="Number of unread contact messages")
