from .auth_services import auth_service
from .blog_services import blog_service
from .booking_services import booking_service
from .car_services import car_service
from .contact_services import contact_service
from .notification_services import notification_service
from .stats_services import stats_service


__all__ = [
    "auth_service",
    "blog_service",
    "booking_service",
    "car_service",
    "contact_service",
    "notification_service",
    "stats_service",
]
