from .utility_schemas import (
    BaseSchema,
    MongoSchema,
    Msg,
    PaginatedResponse,
    PaginationParams,
    ImageUpload,
    ImageRefPublic,
)
from .car_schemas import (
    CarSpecsIn,
    CarSpecsUpdate,
    CarCreate,
    CarUpdate,
    CarImagePublic,
    CarSpecsPublic,
    CarPublic,
    PaginatedCars,
    CarFilterParams,
    parse_car_create,
    parse_car_update,
)
from .booking_schemas import (
    BookingCreate,
    BookingStatusUpdate,
    BookingCarSummary,
    BookingPublic,
    BookingWithCar,
    BookingCreated,
)
from .content_schemas import (
    BlogCreate,
    BlogUpdate,
    BlogPublic,
    BlogStats,
    NameCount,
    ContactCreate,
    ContactPublic,
    ContactReadUpdate,
    ContactSubmitted,
    ContactList,
    parse_blog_create,
    parse_blog_update,
)
from .user_schemas import TokenPayload, TokenResponse, UserCreate, UserUpdate, UserPublic
from .stats_schemas import DashboardStats
