from fastapi.security import OAuth2PasswordRequestForm
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError


from app import schemas
from app.auth import security
from app.collections.user_models import User
from app.crud import user_crud
from app.utils.exception_utils import CredentialsException, DuplicateEntryException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class AuthService:
    """
    Handles back-office authentication, registration and profile updates.
    """

    async def login(
        self, db: AsyncIOMotorDatabase, form_data: OAuth2PasswordRequestForm
    ) -> schemas.TokenResponse:
        """
        Authenticate a user by email and password and issue an access token.

        Args:
            db: Database instance
            form_data: Login credentials payload (username is the email)

        Returns:
            TokenResponse with the access token and role
        """
        user = await user_crud.get_by_email(db, form_data.username)
        if not user or not security.verify_password(form_data.password, user.hashed_password):
            raise CredentialsException("Invalid email or password")

        logger.info(f"User {user.id} logged in")
        return schemas.TokenResponse(
            access_token=security.create_access_token(subject=str(user.id)),
            role=user.role,
        )


    async def register(
        self, db: AsyncIOMotorDatabase, user_in: schemas.UserCreate
    ) -> User:
        """
        Register a new back-office account.

        Args:
            db: Database instance
            user_in: UserCreate request payload

        Returns:
            The stored user

        Raises:
            DuplicateEntryException: If the email is already registered
        """
        if await user_crud.get_by_email(db, user_in.email):
            raise DuplicateEntryException("Email already registered")

        user = User(
            name=user_in.name,
            email=user_in.email,
            hashed_password=security.get_password_hash(user_in.password),
            role=user_in.role,
        )
        try:
            user = await user_crud.create(db, user)
        except DuplicateKeyError:
            raise DuplicateEntryException("Email already registered")
        logger.info(f"User {user.id} registered")
        return user


    async def update_profile(
        self, db: AsyncIOMotorDatabase, user: User, user_in: schemas.UserUpdate
    ) -> User:
        """
        Update name, email or password of the current user.

        Args:
            db: Database instance
            user: Authenticated user
            user_in: Supplied fields

        Returns:
            The updated user

        Raises:
            DuplicateEntryException: If the new email belongs to another account
        """
        update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
        password = update_data.pop("password", None)
        if password:
            update_data["hashed_password"] = security.get_password_hash(password)

        if "email" in update_data and update_data["email"] != user.email:
            existing = await user_crud.get_by_email(db, update_data["email"])
            if existing and existing.id != user.id:
                raise DuplicateEntryException("Email already registered")

        if not update_data:
            return user
        try:
            updated = await user_crud.update(db, user.id, update_data)
        except DuplicateKeyError:
            raise DuplicateEntryException("Email already registered")
        logger.info(f"User {user.id} updated profile")
        return updated


auth_service = AuthService()
