import asyncio
from typing import Any, Dict, List, Optional
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError


from app import schemas
from app.collections.base import ImageRef
from app.collections.content_models import BlogPost
from app.core.config import settings
from app.crud import blog_crud
from app.database.blob_storage import BlobStore
from app.utils.exception_utils import (
    DuplicateEntryException,
    MissingImageException,
    NotFoundException,
)
from app.utils.logger_utils import get_logger
from app.utils.objectid_utils import parse_object_id
from app.utils.slug_utils import id_suffix, slugify
from app.utils.storage_utils import discard_blobs, store_uploads, validate_uploads


logger = get_logger(__name__)


def _post_slug(title: str, post_id: ObjectId) -> str:
    return "-".join(part for part in (slugify(title), id_suffix(post_id)) if part)


class BlogService:
    """
    Service layer for blog posts and their main image.
    """

    async def get_post(self, db: AsyncIOMotorDatabase, post_id: str) -> BlogPost:
        """Retrieve a post by identifier or raise NotFoundException."""
        oid = parse_object_id(post_id)
        post = await blog_crud.get_by_id(db, oid) if oid else None
        if not post:
            raise NotFoundException("Post not found")
        return post


    async def get_post_by_slug(self, db: AsyncIOMotorDatabase, slug: str) -> BlogPost:
        """Retrieve a post by slug or raise NotFoundException."""
        post = await blog_crud.get_by_slug(db, slug)
        if not post:
            raise NotFoundException("Post not found")
        return post


    async def list_posts(self, db: AsyncIOMotorDatabase) -> List[BlogPost]:
        """Retrieve every post, newest first."""
        return await blog_crud.find_many(db)


    async def get_related_posts(
        self, db: AsyncIOMotorDatabase, category: str, current_slug: str
    ) -> List[BlogPost]:
        """
        Retrieve a few posts of the same category, excluding the one being read.

        Args:
            db: Database instance
            category: Category to match
            current_slug: Slug of the post to exclude

        Returns:
            Up to ``RELATED_LIMIT`` posts
        """
        return await blog_crud.find_many(
            db,
            {"category": category, "slug": {"$ne": current_slug}},
            limit=settings.RELATED_LIMIT,
        )


    async def get_stats(self, db: AsyncIOMotorDatabase) -> schemas.BlogStats:
        """
        Count posts per category and find the ten most used tags.

        Args:
            db: Database instance

        Returns:
            BlogStats
        """
        categories = await blog_crud.category_counts(db)
        tags = await blog_crud.top_tags(db, limit=10)
        return schemas.BlogStats(categories=categories, tags=tags)


    async def create_post(
        self,
        db: AsyncIOMotorDatabase,
        blob_store: BlobStore,
        post_in: schemas.BlogCreate,
        image: Optional[schemas.ImageUpload],
    ) -> BlogPost:
        """
        Publish a blog post with its main image.

        Args:
            db: Database instance
            blob_store: Store for blog images
            post_in: Validated post fields
            image: Main image, required

        Returns:
            The stored post

        Raises:
            MissingImageException: If no image was uploaded
            ValidationException: If the image is invalid
            StorageException: If the upload failed
            DuplicateEntryException: If the slug is already taken
        """
        if image is None:
            raise MissingImageException("Main image is required")
        validate_uploads([image], field="image")

        post_id = ObjectId()
        stored = await store_uploads(blob_store, [image], folder=f"blog/{post_id}")
        blob = stored[0]
        try:
            post = BlogPost(
                id=post_id,
                slug=_post_slug(post_in.title, post_id),
                image=ImageRef(url=blob.reference, filename=blob.stored_name),
                **post_in.model_dump(),
            )
            post = await blog_crud.create(db, post)
        except DuplicateKeyError:
            await discard_blobs(blob_store, [blob.stored_name])
            raise DuplicateEntryException("A post with this slug already exists")
        except BaseException:
            await asyncio.shield(discard_blobs(blob_store, [blob.stored_name]))
            raise
        logger.info(f"Blog post {post.id} created with slug {post.slug}")
        return post


    async def update_post(
        self,
        db: AsyncIOMotorDatabase,
        blob_store: BlobStore,
        post_id: str,
        post_in: schemas.BlogUpdate,
        image: Optional[schemas.ImageUpload] = None,
    ) -> BlogPost:
        """
        Apply a partial update to a post, optionally replacing its image.

        Args:
            db: Database instance
            blob_store: Store for blog images
            post_id: Post identifier
            post_in: Supplied fields
            image: Optional replacement image

        Returns:
            The stored post

        Raises:
            NotFoundException: If the post does not exist
            ValidationException: If the image is invalid
            StorageException: If the upload failed
        """
        post = await self.get_post(db, post_id)
        if image is not None:
            validate_uploads([image], field="image")

        data: Dict[str, Any] = post.model_dump(by_alias=True)
        data.update(post_in.model_dump(exclude_unset=True, exclude_none=True))
        if data["title"] != post.title:
            data["slug"] = _post_slug(data["title"], post.id)

        uploaded: List[str] = []
        if image is not None:
            blob = (await store_uploads(blob_store, [image], folder=f"blog/{post.id}"))[0]
            uploaded.append(blob.stored_name)
            data["image"] = ImageRef(url=blob.reference, filename=blob.stored_name)

        try:
            saved = await blog_crud.replace(db, BlogPost(**data))
        except DuplicateKeyError:
            await discard_blobs(blob_store, uploaded)
            raise DuplicateEntryException("A post with this slug already exists")
        except BaseException:
            await asyncio.shield(discard_blobs(blob_store, uploaded))
            raise
        if saved is None:
            await discard_blobs(blob_store, uploaded)
            raise NotFoundException("Post not found")

        if uploaded and post.image.filename:
            await discard_blobs(blob_store, [post.image.filename])
        logger.info(f"Blog post {saved.id} updated")
        return saved


    async def delete_post(
        self, db: AsyncIOMotorDatabase, blob_store: BlobStore, post_id: str
    ) -> schemas.Msg:
        """
        Delete a post and then its image blob.

        Args:
            db: Database instance
            blob_store: Store for blog images
            post_id: Post identifier

        Returns:
            Confirmation message

        Raises:
            NotFoundException: If the post does not exist
        """
        post = await self.get_post(db, post_id)
        if not await blog_crud.delete(db, post.id):
            raise NotFoundException("Post not found")
        await discard_blobs(blob_store, [post.image.filename])
        logger.info(f"Blog post {post.id} deleted")
        return schemas.Msg(message="Post deleted successfully")


blog_service = BlogService()
