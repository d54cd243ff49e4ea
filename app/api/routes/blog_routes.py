from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional


from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.user_models import User
from app.core.dependencies import get_blog_blob_store, get_mongo_db
from app.database.blob_storage import BlobStore
from app.services import blog_service
from app.utils.form_utils import present_fields, read_uploads


router = APIRouter()


@router.get("", response_model=List[schemas.BlogPublic])
async def list_posts(db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return every blog post, newest first."""
    return await blog_service.list_posts(db)


@router.get("/stats", response_model=schemas.BlogStats)
async def get_blog_stats(db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return post counts per category and the ten most used tags."""
    return await blog_service.get_stats(db)


@router.get("/related/{category}/{current_slug}", response_model=List[schemas.BlogPublic])
async def get_related_posts(
    category: str,
    current_slug: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Return a few posts of the same category as the one being read.

    Args:
        category: Post category
        current_slug: Slug of the post being read
        db: Database dependency

    Returns:
        Related posts
    """
    return await blog_service.get_related_posts(db, category, current_slug)


@router.get("/slug/{slug}", response_model=schemas.BlogPublic)
async def get_post_by_slug(slug: str, db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return a blog post by slug."""
    return await blog_service.get_post_by_slug(db, slug)


@router.post("", response_model=schemas.BlogPublic, status_code=status.HTTP_201_CREATED)
async def create_post(
    title: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    author_image: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated tags"),
    featured: Optional[str] = Form(None),
    read_time: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None, description="Main image (JPEG/PNG/GIF/WEBP, max 5MB)"),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blog_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """
    Publish a blog post with its main image.

    Args:
        title: Post title
        excerpt: Short summary
        content: Post body
        author: Author name
        author_image: Optional author picture URL
        category: Post category
        tags: Comma separated tags
        featured: Whether the post is highlighted
        read_time: Reading time in minutes
        image: Main image, required
        db: Database dependency
        blob_store: Blog image store dependency
        current_user: Authenticated administrator

    Returns:
        The created post
    """
    post_in = schemas.parse_blog_create(
        present_fields(
            title=title,
            excerpt=excerpt,
            content=content,
            author=author,
            author_image=author_image,
            category=category,
            tags=tags,
            featured=featured,
            read_time=read_time,
        )
    )
    uploads = await read_uploads([image] if image else [])
    return await blog_service.create_post(
        db, blob_store, post_in, uploads[0] if uploads else None
    )


@router.put("/{post_id}", response_model=schemas.BlogPublic)
async def update_post(
    post_id: str,
    title: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    author_image: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    read_time: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blog_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """
    Partially update a blog post, optionally replacing its image.

    Args:
        post_id: Post identifier
        title: New title (the slug follows it)
        excerpt: New summary
        content: New body
        author: New author name
        author_image: New author picture URL
        category: New category
        tags: New comma separated tags
        featured: New featured flag
        read_time: New reading time
        image: Replacement image
        db: Database dependency
        blob_store: Blog image store dependency
        current_user: Authenticated administrator

    Returns:
        The updated post
    """
    post_in = schemas.parse_blog_update(
        present_fields(
            title=title,
            excerpt=excerpt,
            content=content,
            author=author,
            author_image=author_image,
            category=category,
            tags=tags,
            featured=featured,
            read_time=read_time,
        )
    )
    uploads = await read_uploads([image] if image else [])
    return await blog_service.update_post(
        db, blob_store, post_id, post_in, uploads[0] if uploads else None
    )


@router.delete("/{post_id}", response_model=schemas.Msg)
async def delete_post(
    post_id: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blog_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """Delete a blog post and its image."""
    return await blog_service.delete_post(db, blob_store, post_id)
