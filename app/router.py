from fastapi import APIRouter
from app.api.routes import (
    auth_routes,
    car_routes,
    booking_routes,
    blog_routes,
    contact_routes,
    stats_routes,
    notification_routes,
)

# Master router that bundles all service routers
router = APIRouter()

router.include_router(auth_routes.router, prefix="/auth", tags=["Authentication"])
router.include_router(car_routes.router, prefix="/cars", tags=["Cars"])
router.include_router(booking_routes.router, prefix="/bookings", tags=["Bookings"])
router.include_router(blog_routes.router, prefix="/blog", tags=["Blog"])
router.include_router(contact_routes.router, prefix="/contact", tags=["Contact"])
router.include_router(stats_routes.router, prefix="/stats", tags=["Dashboard"])
router.include_router(
    notification_routes.router, prefix="/notifications", tags=["Notifications"]
)
