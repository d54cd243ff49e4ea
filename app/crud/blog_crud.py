from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from bson import ObjectId


from app.collections.content_models import BlogPost


class BlogCRUD:
    """
    Class for managing blog posts in the ``blog_posts`` collection.
    """

    async def create(self, db: AsyncIOMotorDatabase, post: BlogPost) -> BlogPost:
        """
        Insert a new blog post.

        Args:
            db: Database instance
            post: Post to store

        Returns:
            The stored post with timestamps

        Raises:
            DuplicateKeyError: If the slug is already taken
        """
        now = datetime.now(timezone.utc)
        post.created_at = now
        post.updated_at = now
        await db.blog_posts.insert_one(post.to_document())
        return post


    async def get_by_id(self, db: AsyncIOMotorDatabase, post_id: ObjectId) -> Optional[BlogPost]:
        """
        Retrieve a blog post by its identifier.

        Args:
            db: Database instance
            post_id: Post identifier

        Returns:
            BlogPost if found, None otherwise
        """
        document = await db.blog_posts.find_one({"_id": ObjectId(post_id)})
        return BlogPost(**document) if document else None


    async def get_by_slug(self, db: AsyncIOMotorDatabase, slug: str) -> Optional[BlogPost]:
        """
        Retrieve a blog post by its slug.

        Args:
            db: Database instance
            slug: URL slug

        Returns:
            BlogPost if found, None otherwise
        """
        document = await db.blog_posts.find_one({"slug": slug})
        return BlogPost(**document) if document else None


    async def find_many(
        self,
        db: AsyncIOMotorDatabase,
        query: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[BlogPost]:
        """
        Retrieve blog posts matching a filter, newest first.

        Args:
            db: Database instance
            query: Optional MongoDB filter
            limit: Optional maximum number of records

        Returns:
            List of BlogPost
        """
        cursor = db.blog_posts.find(query or {}).sort("created_at", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        documents = await cursor.to_list(length=limit)
        return [BlogPost(**doc) for doc in documents]


    async def replace(self, db: AsyncIOMotorDatabase, post: BlogPost) -> Optional[BlogPost]:
        """
        Overwrite a stored blog post with its new state.

        Args:
            db: Database instance
            post: Post carrying the identifier of the stored record

        Returns:
            The stored post, or None if the record no longer exists
        """
        post.updated_at = datetime.now(timezone.utc)
        document = post.to_document()
        result = await db.blog_posts.replace_one({"_id": document["_id"]}, document)
        return post if result.matched_count else None


    async def delete(self, db: AsyncIOMotorDatabase, post_id: ObjectId) -> bool:
        """
        Delete a blog post.

        Args:
            db: Database instance
            post_id: Post identifier

        Returns:
            True if a record was removed
        """
        result = await db.blog_posts.delete_one({"_id": ObjectId(post_id)})
        return result.deleted_count > 0


    async def category_counts(self, db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
        """
        Count posts per category.

        Args:
            db: Database instance

        Returns:
            List of ``{"name", "count"}`` sorted by count descending
        """
        pipeline = [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
        ]
        rows = await db.blog_posts.aggregate(pipeline).to_list(length=None)
        return [{"name": row["_id"], "count": row["count"]} for row in rows]


    async def top_tags(self, db: AsyncIOMotorDatabase, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Find the most used tags.

        Args:
            db: Database instance
            limit: Maximum number of tags

        Returns:
            List of ``{"name", "count"}`` sorted by count descending
        """
        pipeline = [
            {"$unwind": "$tags"},
            {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
            {"$limit": limit},
        ]
        rows = await db.blog_posts.aggregate(pipeline).to_list(length=None)
        return [{"name": row["_id"], "count": row["count"]} for row in rows]


blog_crud = BlogCRUD()
