from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional


from app import schemas
from app.auth.dependencies import get_current_admin
from app.collections.user_models import User
from app.core.dependencies import get_blob_store, get_mongo_db
from app.database.blob_storage import BlobStore
from app.services import car_service
from app.utils.form_utils import (
    parse_identifier_list,
    parse_specs,
    present_fields,
    read_uploads,
)


router = APIRouter()


@router.get("", response_model=schemas.PaginatedCars)
async def list_cars(
    filters: schemas.CarFilterParams = Depends(),
    pagination: schemas.PaginationParams = Depends(),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    List car listings, newest first, with optional filters.

    Args:
        filters: Type, brand, availability, featured and price range filters
        pagination: Skip and limit
        db: Database dependency

    Returns:
        Paginated car listings
    """
    return await car_service.list_cars(db, filters, pagination.skip, pagination.limit)


@router.get("/available", response_model=List[schemas.CarPublic])
async def get_available_cars(db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return every car open for booking."""
    return await car_service.get_available_cars(db)


@router.get("/featured", response_model=List[schemas.CarPublic])
async def get_featured_cars(db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return every featured car."""
    return await car_service.get_featured_cars(db)


@router.get("/search", response_model=List[schemas.CarPublic])
async def search_cars(
    q: str = Query(..., min_length=1, description="Text matched against name, brand, type and description"),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Search cars by free text.

    Args:
        q: Search text
        db: Database dependency

    Returns:
        Matching car listings
    """
    return await car_service.search_cars(db, q)


@router.get("/related/{car_type}/{current_slug}", response_model=List[schemas.CarPublic])
async def get_related_cars(
    car_type: str,
    current_slug: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
):
    """
    Return a few cars of the same type as the one being viewed.

    Args:
        car_type: Body type
        current_slug: Slug of the car being viewed
        db: Database dependency

    Returns:
        Related car listings
    """
    return await car_service.get_related_cars(db, car_type, current_slug)


@router.get("/slug/{slug}", response_model=schemas.CarPublic)
async def get_car_by_slug(slug: str, db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return a car listing by slug."""
    return await car_service.get_car_by_slug(db, slug)


@router.get("/{car_id}", response_model=schemas.CarPublic)
async def get_car(car_id: str, db: AsyncIOMotorDatabase = Depends(get_mongo_db)):
    """Return a car listing by identifier."""
    return await car_service.get_car(db, car_id)


@router.post("", response_model=schemas.CarPublic, status_code=status.HTTP_201_CREATED)
async def create_car(
    name: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    car_type: Optional[str] = Form(None, alias="type"),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    specs: Optional[str] = Form(None, description="JSON object with seats, fuel and transmission"),
    seats: Optional[str] = Form(None),
    fuel: Optional[str] = Form(None),
    transmission: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    reviews: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    primary_image_index: Optional[str] = Form(None),
    images: List[UploadFile] = File(None, description="1-10 car images (JPEG/PNG/GIF/WEBP, max 5MB each)"),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """
    Create a car listing with its images.

    **Note:** This endpoint takes multipart/form-data. Every invalid field is reported
    in the ``fields`` list of the 400 response.

    Args:
        name: Model name
        brand: Brand name
        car_type: Body type
        price: Rental price
        description: Listing description
        specs: Optional JSON specs object
        seats: Number of seats
        fuel: Fuel type
        transmission: Transmission type
        rating: Rating between 0 and 5
        reviews: Number of reviews
        available: Whether the car can be booked
        featured: Whether the car is highlighted
        primary_image_index: Index of the image to mark as primary
        images: Uploaded images, at least one
        db: Database dependency
        blob_store: Image store dependency
        current_user: Authenticated administrator

    Returns:
        The created car listing
    """
    car_in = schemas.parse_car_create(
        present_fields(
            name=name,
            brand=brand,
            type=car_type,
            price=price,
            description=description,
            specs=parse_specs(specs, seats, fuel, transmission),
            rating=rating,
            reviews=reviews,
            available=available,
            featured=featured,
            primary_image_index=primary_image_index,
        )
    )
    uploads = await read_uploads(images)
    return await car_service.create_car(db, blob_store, car_in, uploads)


@router.put("/{car_id}", response_model=schemas.CarPublic)
async def update_car(
    car_id: str,
    name: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    car_type: Optional[str] = Form(None, alias="type"),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    specs: Optional[str] = Form(None),
    seats: Optional[str] = Form(None),
    fuel: Optional[str] = Form(None),
    transmission: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    reviews: Optional[str] = Form(None),
    available: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    primary_image_index: Optional[str] = Form(None),
    images_to_delete: Optional[List[str]] = Form(
        None, description="Image ids, blob names or URLs (JSON array or comma separated)"
    ),
    images: List[UploadFile] = File(None),
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """
    Partially update a car listing. Only the fields sent are changed; images can be
    removed and appended in the same request.

    Args:
        car_id: Listing identifier
        name: New model name
        brand: New brand name
        car_type: New body type
        price: New rental price
        description: New description
        specs: Optional JSON object with spec keys to change
        seats: New number of seats
        fuel: New fuel type
        transmission: New transmission type
        rating: New rating
        reviews: New number of reviews
        available: New availability
        featured: New featured flag
        primary_image_index: Index into the resulting image list to mark as primary
        images_to_delete: Images to remove
        images: Images to append
        db: Database dependency
        blob_store: Image store dependency
        current_user: Authenticated administrator

    Returns:
        The updated car listing
    """
    car_in = schemas.parse_car_update(
        present_fields(
            name=name,
            brand=brand,
            type=car_type,
            price=price,
            description=description,
            specs=parse_specs(specs, seats, fuel, transmission),
            rating=rating,
            reviews=reviews,
            available=available,
            featured=featured,
            primary_image_index=primary_image_index,
            images_to_delete=parse_identifier_list(images_to_delete, "images_to_delete"),
        )
    )
    uploads = await read_uploads(images)
    return await car_service.update_car(db, blob_store, car_id, car_in, uploads)


@router.delete("/{car_id}", response_model=schemas.Msg)
async def delete_car(
    car_id: str,
    db: AsyncIOMotorDatabase = Depends(get_mongo_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_admin),
):
    """
    Delete a car listing and its images.

    Args:
        car_id: Listing identifier
        db: Database dependency
        blob_store: Image store dependency
        current_user: Authenticated administrator

    Returns:
        Confirmation message
    """
    await car_service.delete_car(db, blob_store, car_id)
    return schemas.Msg(message="Car deleted")
