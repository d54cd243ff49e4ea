from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone
from bson import ObjectId


from app.collections.car_models import CarListing


class CarCRUD:
    """
    Class for persisting car listings in the ``cars`` collection.
    """

    async def get_by_id(
        self, db: AsyncIOMotorDatabase, car_id: ObjectId
    ) -> Optional[CarListing]:
        """
        Retrieve a car listing by its identifier.

        Args:
            db: Database instance
            car_id: Listing identifier

        Returns:
            CarListing if found, None otherwise
        """
        document = await db.cars.find_one({"_id": ObjectId(car_id)})
        return CarListing(**document) if document else None


    async def get_by_slug(
        self, db: AsyncIOMotorDatabase, slug: str
    ) -> Optional[CarListing]:
        """
        Retrieve a car listing by its slug.

        Args:
            db: Database instance
            slug: URL slug

        Returns:
            CarListing if found, None otherwise
        """
        document = await db.cars.find_one({"slug": slug})
        return CarListing(**document) if document else None


    async def create(self, db: AsyncIOMotorDatabase, car: CarListing) -> CarListing:
        """
        Insert a new car listing. The identifier is set by the caller.

        Args:
            db: Database instance
            car: Listing to insert

        Returns:
            The stored listing with timestamps

        Raises:
            DuplicateKeyError: If the slug or the brand/name pair is already taken
        """
        now = datetime.now(timezone.utc)
        car.created_at = now
        car.updated_at = now
        await db.cars.insert_one(car.to_document())
        return car


    async def replace(self, db: AsyncIOMotorDatabase, car: CarListing) -> Optional[CarListing]:
        """
        Overwrite a stored listing with its new state.

        Args:
            db: Database instance
            car: Listing carrying the identifier of the stored record

        Returns:
            The stored listing, or None if the record no longer exists

        Raises:
            DuplicateKeyError: If the new slug or brand/name pair is already taken
        """
        car.updated_at = datetime.now(timezone.utc)
        document = car.to_document()
        result = await db.cars.replace_one({"_id": document["_id"]}, document)
        return car if result.matched_count else None


    async def delete(self, db: AsyncIOMotorDatabase, car_id: ObjectId) -> bool:
        """
        Delete a car listing.

        Args:
            db: Database instance
            car_id: Listing identifier

        Returns:
            True if a record was removed
        """
        result = await db.cars.delete_one({"_id": ObjectId(car_id)})
        return result.deleted_count > 0


    async def get_paginated(
        self,
        db: AsyncIOMotorDatabase,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[CarListing], int]:
        """
        Retrieve a page of listings matching a filter, newest first.

        Args:
            db: Database instance
            query: MongoDB filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (listings, total matching count)
        """
        total = await db.cars.count_documents(query)
        cursor = (
            db.cars.find(query).sort("created_at", DESCENDING).skip(skip).limit(limit)
        )
        documents = await cursor.to_list(length=limit)
        return [CarListing(**doc) for doc in documents], total


    async def find_many(
        self,
        db: AsyncIOMotorDatabase,
        query: Dict[str, Any],
        limit: Optional[int] = None,
    ) -> List[CarListing]:
        """
        Retrieve every listing matching a filter, newest first.

        Args:
            db: Database instance
            query: MongoDB filter
            limit: Optional maximum number of records

        Returns:
            List of CarListing
        """
        cursor = db.cars.find(query).sort("created_at", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        documents = await cursor.to_list(length=limit)
        return [CarListing(**doc) for doc in documents]


    async def get_summaries(
        self, db: AsyncIOMotorDatabase, car_ids: List[ObjectId]
    ) -> Dict[ObjectId, Dict[str, Any]]:
        """
        Retrieve name, brand and thumbnail of several listings at once.

        Args:
            db: Database instance
            car_ids: Listing identifiers

        Returns:
            Mapping of identifier to summary document
        """
        cursor = db.cars.find(
            {"_id": {"$in": list(car_ids)}},
            {"name": 1, "brand": 1, "thumbnail": 1},
        )
        documents = await cursor.to_list(length=None)
        return {doc["_id"]: doc for doc in documents}


    async def count(
        self, db: AsyncIOMotorDatabase, query: Optional[Dict[str, Any]] = None
    ) -> int:
        """Count listings matching an optional filter."""
        return await db.cars.count_documents(query or {})


car_crud = CarCRUD()
