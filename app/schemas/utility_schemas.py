from pydantic import BaseModel, Field, ConfigDict
from fastapi import Query
from typing import List, Generic, Optional, TypeVar
from datetime import datetime


from app.utils.objectid_utils import PyObjectId


T = TypeVar("T")


class BaseSchema(BaseModel):
    """
    Schema with configuration to allow ORM mode for database models.
    """
    model_config = ConfigDict(from_attributes=True)


class MongoSchema(BaseModel):
    """
    Schema base for documents read from MongoDB, exposing the identifier as ``_id``.
    """
    id: PyObjectId = Field(..., alias="_id", description="Document unique identifier")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Msg(BaseModel):
    """
    Schema for generic message responses.
    """
    message: str = Field(..., description="Response message content")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Schema for paginated responses with total count and items.
    """
    total: int = Field(..., description="Total number of records matching filters")
    items: List[T] = Field(..., description="List of paginated records")
    skip: int = Field(..., description="Number of records skipped for pagination")
    limit: int = Field(..., description="Maximum number of records returned")


class PaginationParams:
    """
    Schema for pagination parameters in requests.
    """
    def __init__(
        self,
        skip: int = Query(
            0, ge=0, description="Number of records to skip for pagination"
        ),
        limit: int = Query(
            20, ge=1, le=100, description="Maximum number of records to return per page"
        ),
    ):
        self.skip = skip
        self.limit = limit


class ImageUpload(BaseModel):
    """
    Uploaded image already read from the multipart request.
    """
    filename: str = Field(..., description="Client supplied file name")
    content_type: str = Field(..., description="Declared MIME type")
    data: bytes = Field(..., description="File content")

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class ImageRefPublic(BaseSchema):
    """
    Schema for a stored image reference.
    """
    url: str = Field("", description="Public URL of the image")
    filename: str = Field("", description="Blob name of the image")
