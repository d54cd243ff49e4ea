import asyncio
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError


from app import schemas
from app.collections.car_models import CarListing
from app.core.config import settings
from app.crud import booking_crud, car_crud
from app.database.blob_storage import BlobStore
from app.utils.exception_utils import (
    ConflictException,
    DuplicateEntryException,
    EmptyImageSetException,
    MissingImageException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from app.utils.image_utils import count_surviving, reconcile_images, thumbnail_for
from app.utils.logger_utils import get_logger
from app.utils.objectid_utils import parse_object_id
from app.utils.slug_utils import generate_slug, id_suffix
from app.utils.storage_utils import discard_blobs, store_uploads, validate_uploads
from .notification_services import notification_service


logger = get_logger(__name__)


class CarService:
    """
    Service layer for car listings. Keeps the stored listing and its image blobs
    consistent: uploads written by a request that fails are deleted again, and blobs
    dropped from a listing are deleted once the new state is saved.
    """

    def _check_image_count(self, count: int) -> None:
        if count > settings.MAX_IMAGES_PER_CAR:
            raise ValidationException(
                detail="Too many images",
                fields=[
                    {
                        "field": "images",
                        "message": f"A car can have at most {settings.MAX_IMAGES_PER_CAR} images",
                    }
                ],
            )


    def _duplicate_detail(self, error: DuplicateKeyError) -> str:
        key_pattern = (error.details or {}).get("keyPattern") or {}
        if "slug" in key_pattern:
            return "A car with this slug already exists"
        return "A car with this name and brand already exists"


    async def _save(
        self,
        save: Callable[[AsyncIOMotorDatabase, CarListing], Awaitable[Optional[CarListing]]],
        db: AsyncIOMotorDatabase,
        blob_store: BlobStore,
        car: CarListing,
        uploaded: List[str],
    ) -> Optional[CarListing]:
        """
        Persist a listing, deleting the blobs uploaded by this request if the write fails.

        Args:
            save: Repository write (``car_crud.create`` or ``car_crud.replace``)
            db: Database instance
            blob_store: Store holding the new uploads
            car: Listing to persist
            uploaded: Blob names written by this request

        Returns:
            Result of the repository write
        """
        try:
            return await save(db, car)
        except DuplicateKeyError as e:
            await discard_blobs(blob_store, uploaded)
            raise DuplicateEntryException(self._duplicate_detail(e))
        except (PyMongoError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to save car {car.id}: {e}")
            await discard_blobs(blob_store, uploaded)
            raise RepositoryException()
        except BaseException:
            await asyncio.shield(discard_blobs(blob_store, uploaded))
            raise


    async def create_car(
        self,
        db: AsyncIOMotorDatabase,
        blob_store: BlobStore,
        car_in: schemas.CarCreate,
        images: List[schemas.ImageUpload],
    ) -> CarListing:
        """
        Create a car listing together with its images.

        Args:
            db: Database instance
            blob_store: Store for the listing images
            car_in: Validated listing fields
            images: Uploaded images, at least one

        Returns:
            The stored listing

        Raises:
            MissingImageException: If no image was uploaded
            ValidationException: If an image is invalid or there are too many
            StorageException: If an upload failed (nothing is left behind)
            DuplicateEntryException: If the slug or name/brand is already taken
            RepositoryException: If the database write failed
        """
        if not images:
            raise MissingImageException()
        self._check_image_count(len(images))
        validate_uploads(images)

        car_id = ObjectId()
        stored = await store_uploads(blob_store, images, folder=f"cars/{car_id}")
        uploaded = [blob.stored_name for blob in stored]

        try:
            car_images, _ = reconcile_images(
                [],
                [],
                stored,
                primary_index=car_in.primary_image_index,
                alt_text=f"{car_in.brand} {car_in.name}",
            )
            car = CarListing(
                id=car_id,
                slug=generate_slug(car_in.brand, car_in.name, id_suffix(car_id)),
                images=car_images,
                thumbnail=thumbnail_for(car_images),
                **car_in.model_dump(exclude={"primary_image_index"}),
            )
        except BaseException:
            await asyncio.shield(discard_blobs(blob_store, uploaded))
            raise

        car = await self._save(car_crud.create, db, blob_store, car, uploaded)
        logger.info(f"Car {car.id} created with slug {car.slug} and {len(car.images)} images")
        notification_service.publish(
            "carCreated", {"id": str(car.id), "slug": car.slug, "name": car.name, "brand": car.brand}
        )
        return car


    async def update_car(
        self,
        db: AsyncIOMotorDatabase,
        blob_store: BlobStore,
        car_id: str,
        car_in: schemas.CarUpdate,
        images: Optional[List[schemas.ImageUpload]] = None,
    ) -> CarListing:
        """
        Apply a partial update to a listing, including image removals and additions.

        Args:
            db: Database instance
            blob_store: Store for the listing images
            car_id: Listing identifier
            car_in: Supplied fields, image deletion requests and primary index
            images: New images to append

        Returns:
            The stored listing

        Raises:
            NotFoundException: If the listing does not exist
            EmptyImageSetException: If the update would leave no image
            ValidationException: If an image is invalid or there are too many
            StorageException: If an upload failed (nothing is left behind)
            DuplicateEntryException: If the new slug or name/brand is already taken
            RepositoryException: If the database write failed
        """
        car = await self.get_car(db, car_id)
        images = images or []
        if images:
            validate_uploads(images)

        total = count_surviving(car.images, car_in.images_to_delete) + len(images)
        if total == 0:
            raise EmptyImageSetException()
        self._check_image_count(total)

        patch = car_in.field_patch()
        data: Dict[str, Any] = car.model_dump(by_alias=True)
        data.update(patch)
        if car_in.specs is not None:
            data["specs"].update(car_in.specs.model_dump(exclude_none=True))

        stored = await store_uploads(blob_store, images, folder=f"cars/{car.id}")
        uploaded = [blob.stored_name for blob in stored]

        try:
            next_images, removed = reconcile_images(
                car.images,
                car_in.images_to_delete,
                stored,
                primary_index=car_in.primary_image_index,
                alt_text=f"{data['brand']} {data['name']}",
            )
            data["images"] = next_images
            data["thumbnail"] = thumbnail_for(next_images)
            if data["name"] != car.name or data["brand"] != car.brand:
                data["slug"] = generate_slug(data["brand"], data["name"], id_suffix(car.id))
            updated = CarListing(**data)
        except BaseException:
            await asyncio.shield(discard_blobs(blob_store, uploaded))
            raise

        saved = await self._save(car_crud.replace, db, blob_store, updated, uploaded)
        if saved is None:
            await discard_blobs(blob_store, uploaded)
            raise NotFoundException("Car not found")

        failed = await discard_blobs(blob_store, [img.filename for img in removed])
        if failed:
            logger.warning(f"Car {saved.id} updated, {len(failed)} removed image blobs left behind")
        logger.info(
            f"Car {saved.id} updated: {len(stored)} images added, {len(removed)} removed"
        )
        notification_service.publish(
            "carUpdated", {"id": str(saved.id), "slug": saved.slug, "name": saved.name, "brand": saved.brand}
        )
        return saved


    async def delete_car(
        self, db: AsyncIOMotorDatabase, blob_store: BlobStore, car_id: str
    ) -> CarListing:
        """
        Delete a listing and then its image blobs.

        Args:
            db: Database instance
            blob_store: Store for the listing images
            car_id: Listing identifier

        Returns:
            The deleted listing

        Raises:
            NotFoundException: If the listing does not exist
            ConflictException: If active bookings reference the car and the delete policy blocks
            RepositoryException: If the database write failed
        """
        car = await self.get_car(db, car_id)

        if settings.CAR_DELETE_POLICY == "block":
            active = await booking_crud.count_active_for_car(db, car.id)
            if active:
                raise ConflictException(
                    f"Car has {active} active booking(s) and cannot be deleted"
                )

        try:
            deleted = await car_crud.delete(db, car.id)
        except PyMongoError as e:
            logger.error(f"Failed to delete car {car.id}: {e}")
            raise RepositoryException()
        if not deleted:
            raise NotFoundException("Car not found")

        if settings.CAR_DELETE_POLICY == "cascade":
            removed_bookings = await booking_crud.delete_for_car(db, car.id)
            logger.info(f"Deleted {removed_bookings} bookings of car {car.id}")

        blob_names = [img.filename for img in car.images] + [car.thumbnail.filename]
        failed = await discard_blobs(blob_store, blob_names)
        if failed:
            logger.warning(f"Car {car.id} deleted, {len(failed)} image blobs left behind")
        logger.info(f"Car {car.id} deleted")
        notification_service.publish("carDeleted", {"id": str(car.id), "slug": car.slug})
        return car


    async def get_car(self, db: AsyncIOMotorDatabase, car_id: str) -> CarListing:
        """
        Retrieve a listing by identifier.

        Args:
            db: Database instance
            car_id: Listing identifier

        Returns:
            CarListing

        Raises:
            NotFoundException: If the identifier is invalid or unknown
        """
        oid = parse_object_id(car_id)
        car = await car_crud.get_by_id(db, oid) if oid else None
        if not car:
            raise NotFoundException("Car not found")
        return car


    async def get_car_by_slug(self, db: AsyncIOMotorDatabase, slug: str) -> CarListing:
        """Retrieve a listing by slug or raise NotFoundException."""
        car = await car_crud.get_by_slug(db, slug)
        if not car:
            raise NotFoundException("Car not found")
        return car


    async def list_cars(
        self,
        db: AsyncIOMotorDatabase,
        filters: schemas.CarFilterParams,
        skip: int,
        limit: int,
    ) -> schemas.PaginatedCars:
        """
        Retrieve a page of listings, newest first.

        Args:
            db: Database instance
            filters: Optional type, brand, availability, featured and price filters
            skip: Pagination offset
            limit: Pagination limit

        Returns:
            PaginatedCars with total count and items
        """
        query: Dict[str, Any] = {}
        if filters.type:
            query["type"] = getattr(filters.type, "value", filters.type)
        if filters.brand:
            query["brand"] = {"$regex": f"^{re.escape(filters.brand.strip())}$", "$options": "i"}
        if filters.available is not None:
            query["available"] = filters.available
        if filters.featured is not None:
            query["featured"] = filters.featured
        price: Dict[str, int] = {}
        if filters.min_price is not None:
            price["$gte"] = filters.min_price
        if filters.max_price is not None:
            price["$lte"] = filters.max_price
        if price:
            query["price"] = price

        cars, total = await car_crud.get_paginated(db, query, skip, limit)
        return schemas.PaginatedCars(
            total=total,
            items=[schemas.CarPublic.model_validate(car.to_document()) for car in cars],
            skip=skip,
            limit=limit,
        )


    async def get_available_cars(self, db: AsyncIOMotorDatabase) -> List[CarListing]:
        """Retrieve every listing open for booking."""
        return await car_crud.find_many(db, {"available": True})


    async def get_featured_cars(self, db: AsyncIOMotorDatabase) -> List[CarListing]:
        """Retrieve every featured listing."""
        return await car_crud.find_many(db, {"featured": True})


    async def search_cars(self, db: AsyncIOMotorDatabase, q: str) -> List[CarListing]:
        """
        Case-insensitive substring search over name, brand, type and description.

        Args:
            db: Database instance
            q: Search text, matched literally

        Returns:
            Matching listings, newest first
        """
        pattern = {"$regex": re.escape(q.strip()), "$options": "i"}
        query = {
            "$or": [
                {"name": pattern},
                {"brand": pattern},
                {"type": pattern},
                {"description": pattern},
            ]
        }
        return await car_crud.find_many(db, query)


    async def get_related_cars(
        self, db: AsyncIOMotorDatabase, car_type: str, current_slug: str
    ) -> List[CarListing]:
        """
        Retrieve a few listings of the same type, excluding the one being viewed.

        Args:
            db: Database instance
            car_type: Body type to match
            current_slug: Slug of the listing to exclude

        Returns:
            Up to ``RELATED_LIMIT`` listings
        """
        return await car_crud.find_many(
            db,
            {"type": car_type, "slug": {"$ne": current_slug}},
            limit=settings.RELATED_LIMIT,
        )


car_service = CarService()
