from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator
from typing import Any, Dict, List, Optional


from app.utils.exception_utils import ValidationException, fields_from_pydantic
from .utility_schemas import ImageRefPublic, MongoSchema


def _split_tags(value):
    if value is None:
        return value
    if isinstance(value, str):
        value = value.split(",")
    return [tag.strip() for tag in value if tag and tag.strip()]


class BlogCreate(BaseModel):
    """
    Schema for publishing a blog post. The main image travels separately as an upload.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    excerpt: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1, max_length=100)
    author_image: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    read_time: int = Field(..., ge=1, description="Estimated reading time in minutes")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return _split_tags(v)


class BlogUpdate(BaseModel):
    """
    Schema for updating a blog post. All fields are optional (partial update).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    excerpt: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1, max_length=100)
    author_image: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    featured: Optional[bool] = None
    read_time: Optional[int] = Field(None, ge=1)

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return _split_tags(v)


def parse_blog_create(data: Dict[str, Any]) -> BlogCreate:
    """
    Validate raw blog post input, reporting every offending field at once.

    Args:
        data: Raw field values

    Returns:
        Validated BlogCreate
    """
    try:
        return BlogCreate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(fields=fields_from_pydantic(e.errors()))


def parse_blog_update(data: Dict[str, Any]) -> BlogUpdate:
    """
    Validate a raw partial blog post update.

    Args:
        data: Raw field values present in the request

    Returns:
        Validated BlogUpdate
    """
    try:
        return BlogUpdate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(fields=fields_from_pydantic(e.errors()))


class BlogPublic(MongoSchema):
    """
    Schema for blog post details.
    """
    title: str
    slug: str
    excerpt: str
    content: str
    image: ImageRefPublic
    author: str
    author_image: Optional[str] = None
    category: str
    tags: List[str]
    featured: bool
    views: int
    likes: int
    read_time: int


class NameCount(BaseModel):
    """
    Schema for an aggregated bucket.
    """
    name: str
    count: int


class BlogStats(BaseModel):
    """
    Schema for blog category counts and most used tags.
    """
    categories: List[NameCount]
    tags: List[NameCount]


class ContactCreate(BaseModel):
    """
    Schema for a message sent through the contact form.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=30)
    inquiry_type: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=5000)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str):
        return v.lower()


class ContactPublic(MongoSchema):
    """
    Schema for contact message details.
    """
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    inquiry_type: str
    message: str
    is_read: bool


class ContactReadUpdate(BaseModel):
    """
    Schema for marking a contact message as read or unread.
    """
    is_read: bool


class ContactSubmitted(BaseModel):
    """
    Schema for the contact form acknowledgment.
    """
    message: str
    data: ContactPublic


class ContactList(BaseModel):
    """
    Schema for the admin list of contact messages.
    """
    count: int
    items: List[ContactPublic]
