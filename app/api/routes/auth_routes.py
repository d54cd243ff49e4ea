from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from motor.motor_asyncio import AsyncIOMotorDatabase


from app import schemas
from app.auth.dependencies import get_current_admin, get_current_user
from app.collections.user_models import User
from app.core.dependencies import get_mongo_db
from app.services import auth_service


router = APIRouter()


@router.post("/login", response_model=schemas.TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Authenticate a user and issue an access token.

    Args:
        form_data: OAuth2 form data; the username is the account email
        db: Database dependency

    Returns:
        TokenResponse containing access token and user role
    """
    return await auth_service.login(db, form_data)


@router.post("/register", response_model=schemas.UserPublic, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: schemas.UserCreate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Register a new back-office account.

    Args:
        user_in: Name, email, password and role
        db: Database dependency
        current_user: Authenticated administrator

    Returns:
        The created user
    """
    return await auth_service.register(db, user_in)


@router.get("/me", response_model=schemas.UserPublic)
async def get_me(current_user: User = Depends(get_current_user)):
    """Return the profile of the authenticated user."""
    return current_user


@router.put("/me", response_model=schemas.UserPublic)
async def update_me(
    user_in: schemas.UserUpdate,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update name, email or password of the authenticated user.

    Args:
        user_in: Supplied fields
        db: Database dependency
        current_user: Authenticated user

    Returns:
        The updated profile
    """
    return await auth_service.update_profile(db, current_user, user_in)
