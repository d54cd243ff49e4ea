from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


from app.collections.enums import UserRole
from .utility_schemas import BaseSchema, MongoSchema


class TokenPayload(BaseSchema):
    """
    Schema for JWT token payload data.
    """
    sub: str = Field(..., description="Subject (user ID)")
    exp: datetime = Field(..., description="Token expiration timestamp")
    type: str = Field(..., description="Token type")


class TokenResponse(BaseSchema):
    """
    Schema for authentication token response.
    """
    access_token: str = Field(..., description="JWT access token for API authorization")
    token_type: str = Field("bearer", description="Token scheme")
    role: Optional[str] = Field(None, description="User role associated with the token")


class UserCreate(BaseModel):
    """
    Schema for registering a back-office account.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Plain text password")
    role: UserRole = UserRole.ADMIN

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str):
        return v.lower()


class UserUpdate(BaseModel):
    """
    Schema for updating the current user's profile. All fields are optional.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]):
        return v.lower() if v else v


class UserPublic(MongoSchema):
    """
    Schema for user profile details.
    """
    name: str
    email: str
    role: UserRole
