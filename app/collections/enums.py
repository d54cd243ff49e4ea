import enum


class CarType(str, enum.Enum):
    """
    Body type of a car listing.
    """

    SEDAN = "Sedan"
    SUV = "SUV"
    HATCHBACK = "Hatchback"
    COUPE = "Coupe"
    TRUCK = "Truck"


class FuelType(str, enum.Enum):
    """
    Fuel used by a car.
    """

    PETROL = "Petrol"
    DIESEL = "Diesel"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"


class TransmissionType(str, enum.Enum):
    """
    Gearbox type of a car.
    """

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class BookingStatus(str, enum.Enum):
    """
    Lifecycle status of a booking. Only CONFIRMED bookings are active.
    """

    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(str, enum.Enum):
    """
    Role of a registered user.
    """

    ADMIN = "admin"
    USER = "user"
