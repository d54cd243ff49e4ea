from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


from app.utils.objectid_utils import PyObjectId


class BaseDocument(BaseModel):
    """
    Base model for embedded MongoDB sub-documents.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class BaseMongoModel(BaseDocument):
    """
    Base model for all MongoDB documents with ObjectId support.
    """

    id: PyObjectId = Field(alias="_id", default_factory=PyObjectId)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        """Return the document as stored in MongoDB (``_id`` key, enum values)."""
        return self.model_dump(by_alias=True)


class ImageRef(BaseDocument):
    """
    Snapshot of a stored image: public URL plus the blob name needed to delete it.
    """

    url: str = ""
    filename: str = ""
