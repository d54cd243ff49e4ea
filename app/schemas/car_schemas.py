from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator
from typing import Any, Dict, List, Optional


from app.collections.enums import CarType, FuelType, TransmissionType
from app.core.config import settings
from app.utils.exception_utils import ValidationException, fields_from_pydantic
from .utility_schemas import BaseSchema, ImageRefPublic, MongoSchema, PaginatedResponse


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    value = _non_blank(value)
    if value is not None and len(value) > settings.CAR_DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"must be at most {settings.CAR_DESCRIPTION_MAX_LENGTH} characters"
        )
    return value


def _check_price(value: Optional[int]) -> Optional[int]:
    if value is not None and settings.ENFORCE_PRICE_MULTIPLE_OF_100 and value % 100:
        raise ValueError("must be a multiple of 100")
    return value


class CarSpecsIn(BaseModel):
    """
    Schema for the technical specification of a new car.
    """
    seats: int = Field(5, ge=1, le=50, description="Number of seats")
    fuel: FuelType = Field(FuelType.PETROL, description="Fuel type")
    transmission: TransmissionType = Field(
        TransmissionType.AUTOMATIC, description="Transmission type"
    )


class CarSpecsUpdate(BaseModel):
    """
    Schema for a partial specification update. Absent keys keep their stored value.
    """
    seats: Optional[int] = Field(None, ge=1, le=50)
    fuel: Optional[FuelType] = None
    transmission: Optional[TransmissionType] = None


class CarCreate(BaseModel):
    """
    Schema for creating a car listing. Images travel separately as uploads.
    """
    name: str = Field(..., description="Model name")
    brand: str = Field(..., description="Brand name")
    type: CarType = Field(..., description="Body type")
    price: int = Field(..., ge=0, description="Rental price in whole currency units")
    description: str = Field(..., description="Listing description")
    specs: CarSpecsIn = Field(default_factory=CarSpecsIn)
    rating: float = Field(5.0, ge=0, le=5)
    reviews: int = Field(0, ge=0)
    available: bool = True
    featured: bool = False
    primary_image_index: Optional[int] = Field(
        None, ge=0, description="Index of the uploaded image to mark as primary"
    )

    @field_validator("name", "brand")
    @classmethod
    def validate_name_brand(cls, v):
        return _non_blank(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _check_description(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class CarUpdate(BaseModel):
    """
    Schema for updating a car listing. All fields are optional (partial update).
    """
    name: Optional[str] = None
    brand: Optional[str] = None
    type: Optional[CarType] = None
    price: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    specs: Optional[CarSpecsUpdate] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    reviews: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
    featured: Optional[bool] = None
    primary_image_index: Optional[int] = Field(None, ge=0)
    images_to_delete: List[str] = Field(
        default_factory=list, description="Image ids, blob names or URLs to remove"
    )

    @field_validator("name", "brand")
    @classmethod
    def validate_name_brand(cls, v):
        return _non_blank(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _check_description(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)

    def field_patch(self) -> Dict[str, Any]:
        """
        Return only the scalar fields the caller actually supplied.

        Returns:
            Dictionary of listing fields to overwrite (specs handled separately)
        """
        return self.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"specs", "primary_image_index", "images_to_delete"},
        )


def parse_car_create(data: Dict[str, Any]) -> CarCreate:
    """
    Validate raw listing input, reporting every offending field at once.

    Args:
        data: Raw field values

    Returns:
        Validated CarCreate
    """
    try:
        return CarCreate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(fields=fields_from_pydantic(e.errors()))


def parse_car_update(data: Dict[str, Any]) -> CarUpdate:
    """
    Validate a raw partial update, reporting every offending field at once.

    Args:
        data: Raw field values present in the request

    Returns:
        Validated CarUpdate
    """
    try:
        return CarUpdate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(fields=fields_from_pydantic(e.errors()))


class CarImagePublic(BaseSchema):
    """
    Schema for an image of a car listing.
    """
    id: str
    url: str
    filename: str
    alt_text: str = ""
    is_primary: bool
    size_bytes: int = 0
    mime_type: str


class CarSpecsPublic(BaseSchema):
    """
    Schema for car specification details.
    """
    seats: int
    fuel: str
    transmission: str


class CarPublic(MongoSchema):
    """
    Schema for complete car listing details.
    """
    name: str
    brand: str
    type: str
    slug: str
    price: int
    description: str
    specs: CarSpecsPublic
    rating: float
    reviews: int
    available: bool
    featured: bool
    images: List[CarImagePublic]
    thumbnail: ImageRefPublic


class PaginatedCars(PaginatedResponse[CarPublic]):
    """
    Schema for paginated car listing responses.
    """
    model_config = ConfigDict(from_attributes=True)


class CarFilterParams:
    """
    Schema for filter parameters helper class for car listing searches.
    """
    def __init__(
        self,
        type: Optional[CarType] = None,
        brand: Optional[str] = None,
        available: Optional[bool] = None,
        featured: Optional[bool] = None,
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
    ):
        self.type = type
        self.brand = brand
        self.available = available
        self.featured = featured
        self.min_price = min_price
        self.max_price = max_price
