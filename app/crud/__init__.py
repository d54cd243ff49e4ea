from .blog_crud import blog_crud
from .booking_crud import booking_crud
from .car_crud import car_crud
from .contact_crud import contact_crud
from .user_crud import user_crud


__all__ = [
    "blog_crud",
    "booking_crud",
    "car_crud",
    "contact_crud",
    "user_crud",
]
