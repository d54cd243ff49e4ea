from datetime import datetime
from pydantic import Field


from app.utils.objectid_utils import PyObjectId
from .base import BaseMongoModel
from .enums import BookingStatus


class Booking(BaseMongoModel):
    """
    Collection document for a customer's rental request on a car.
    """

    car_id: PyObjectId = Field(..., description="References cars._id")
    user_email: str
    user_name: str
    user_phone: str
    pickup_date: datetime
    return_date: datetime
    total_price: float
    status: BookingStatus = BookingStatus.CONFIRMED
