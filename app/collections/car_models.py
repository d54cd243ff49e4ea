import uuid
from typing import List
from pydantic import Field


from .base import BaseDocument, BaseMongoModel, ImageRef
from .enums import CarType, FuelType, TransmissionType


class CarImage(BaseDocument):
    """
    Image owned by a car listing. Has no identity outside the listing's ``images`` list.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    url: str
    filename: str = Field(..., description="Blob name in the car container")
    alt_text: str = ""
    is_primary: bool = False
    size_bytes: int = 0
    mime_type: str = "image/jpeg"


class CarSpecs(BaseDocument):
    """
    Technical specification embedded in a car listing.
    """

    seats: int = 5
    fuel: FuelType = FuelType.PETROL
    transmission: TransmissionType = TransmissionType.AUTOMATIC


class CarListing(BaseMongoModel):
    """
    Collection document for a rentable car with its image gallery.
    """

    name: str
    brand: str
    type: CarType = CarType.SEDAN
    price: int
    description: str
    specs: CarSpecs = Field(default_factory=CarSpecs)
    rating: float = 5.0
    reviews: int = 0
    available: bool = True
    featured: bool = False
    slug: str
    images: List[CarImage] = Field(default_factory=list)
    thumbnail: ImageRef = Field(default_factory=ImageRef)
