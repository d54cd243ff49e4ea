from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator, model_validator
from typing import Optional
from datetime import datetime, timezone


from app.collections.enums import BookingStatus
from app.utils.objectid_utils import PyObjectId
from .utility_schemas import ImageRefPublic, MongoSchema


class BookingCreate(BaseModel):
    """
    Schema for submitting a booking request on a car.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    car_id: PyObjectId = Field(..., description="Car to book")
    user_email: EmailStr = Field(..., description="Customer email")
    user_name: str = Field(..., min_length=1, max_length=255)
    user_phone: str = Field(..., min_length=1, max_length=30)
    pickup_date: datetime = Field(..., description="Rental start")
    return_date: datetime = Field(..., description="Rental end")
    total_price: float = Field(..., gt=0, description="Quoted total price")

    @field_validator("user_email")
    @classmethod
    def lowercase_email(cls, v: str):
        return v.lower()

    @field_validator("pickup_date", "return_date")
    @classmethod
    def ensure_timezone(cls, v: datetime):
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def validate_dates(self):
        if self.return_date <= self.pickup_date:
            raise ValueError("Return date must be after pickup date")
        return self


class BookingStatusUpdate(BaseModel):
    """
    Schema for changing the status of a booking.
    """
    status: BookingStatus = Field(..., description="New booking status")


class BookingCarSummary(MongoSchema):
    """
    Schema for the car fields embedded in booking responses.
    """
    name: str
    brand: str
    thumbnail: ImageRefPublic


class BookingPublic(MongoSchema):
    """
    Schema for booking details.
    """
    car_id: PyObjectId
    user_email: str
    user_name: str
    user_phone: str
    pickup_date: datetime
    return_date: datetime
    total_price: float
    status: BookingStatus


class BookingWithCar(BookingPublic):
    """
    Schema for booking details populated with the booked car.
    """
    car: Optional[BookingCarSummary] = None


class BookingCreated(BaseModel):
    """
    Schema for the booking confirmation response.
    """
    message: str
    booking: BookingWithCar
