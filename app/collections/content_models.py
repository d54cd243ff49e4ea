from typing import List, Optional
from pydantic import Field


from .base import BaseMongoModel, ImageRef


class BlogPost(BaseMongoModel):
    """
    Collection document for a published blog article.
    """

    title: str
    slug: str
    excerpt: str
    content: str
    image: ImageRef
    author: str
    author_image: Optional[str] = None
    category: str
    tags: List[str] = Field(default_factory=list)
    featured: bool = False
    views: int = 0
    likes: int = 0
    read_time: int = Field(..., description="Estimated reading time in minutes")


class ContactMessage(BaseMongoModel):
    """
    Collection document for a message sent through the contact form.
    """

    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    inquiry_type: str
    message: str
    is_read: bool = False
