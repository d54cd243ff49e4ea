from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.user_models import User
from app.core.dependencies import get_mongo_db
from app.services import stats_service


router = APIRouter()


@router.get("/dashboard", response_model=schemas.DashboardStats)
async def get_dashboard_stats(
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Return the counters shown on the admin dashboard.

    Args:
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        Total cars, confirmed bookings and unread messages
    """
    return await stats_service.get_dashboard_stats(db)
